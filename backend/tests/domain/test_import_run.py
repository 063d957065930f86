from revstox.domain.import_run import ImportRun, RowResult, RowStatus


def test_record_updates_counters():
    run = ImportRun(source="x.csv")
    run.record(RowResult.accepted(2, "TCS"))
    run.record(RowResult.rejected(3, "invalid date", "TCS"))

    assert run.total == 2
    assert run.successful == 1
    assert run.failed == 1
    assert [r.line_no for r in run.rejections] == [3]
    assert run.rejections[0].status is RowStatus.REJECTED


def test_succeeded_only_without_failures():
    run = ImportRun(source="x.csv")
    run.record(RowResult.accepted(2, "TCS"))
    assert run.succeeded

    run.record(RowResult.rejected(3, "missing close"))
    assert not run.succeeded


def test_file_error_means_failure():
    run = ImportRun(source="missing.csv", file_error="No such file")
    assert run.total == 0
    assert not run.succeeded
