from cleaner.domain.reporting.collector import STATUS_FAILED, STATUS_OK, ReportCollector, asdict_report


def test_every_file_gets_an_item_and_status_is_partial():
    collector = ReportCollector(run_id="run-1", command="clean")
    for index in range(5):
        collector.add_file(file=f"Bilingual_{index}.stf", status=STATUS_OK, total=4, valid=3, invalid=1,
                           rejections={"FILE_MISSING": 1})
    collector.add_file(file="Bilingual_broken.stf", status=STATUS_FAILED, message="cannot decode")
    collector.finish(duration_ms=12)

    data = asdict_report(collector.build())

    assert data["status"] == "PARTIAL"
    assert len(data["items"]) == 6
    assert data["summary"]["lines_total"] == 20
    assert data["summary"]["by_code"] == {"FILE_MISSING": 5}
    assert set(data["meta"]) == {"run_id", "command", "started_at", "finished_at", "duration_ms"}


def test_all_failed_is_failed():
    collector = ReportCollector(run_id="run-1", command="clean")
    collector.add_file(file="a.stf", status=STATUS_FAILED, message="boom")
    collector.finish()
    assert collector.build().status == "FAILED"
