from dotboot.report import RunReport, summarize
from dotboot.types import Outcome, RunOutcome


def build_report(statuses: list[Outcome]) -> RunReport:
    report = RunReport(name="demo")
    for idx, status in enumerate(statuses):
        report.add(RunOutcome(name=f"item{idx}", status=status))
    return report.finalize()


def test_summary_counts_add_up():
    statuses = [
        Outcome.INSTALLED,
        Outcome.FAILED,
        Outcome.ALREADY_PRESENT,
        Outcome.INSTALLED,
        Outcome.FAILED,
    ]
    report = build_report(statuses)
    summary = summarize(report)

    assert summary.installed_count == 2
    assert summary.skipped_count == 1
    assert summary.failed_count == 2
    assert summary.installed_count + summary.skipped_count + summary.failed_count == len(report)
    assert summary.total == len(report)


def test_summary_failed_names_keep_report_order():
    report = build_report([Outcome.FAILED, Outcome.INSTALLED, Outcome.FAILED])
    assert summarize(report).failed_names == ("item0", "item2")


def test_summary_of_empty_report():
    summary = summarize(RunReport().finalize())
    assert summary.total == 0
    assert summary.failed_names == ()
