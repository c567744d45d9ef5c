"""Tests for audit report and final report aggregation."""

from hostkeeper.core.report import AUDIT_HEADER, LOG_HEADER, AuditReport, finalize


class TestAuditReport:
    """Tests for AuditReport."""

    def test_append_section(self, session):
        report = AuditReport(session.audit_path)

        report.append_section("Memory", "Mem: 16Gi")

        assert report.read() == "\n===== Memory =====\nMem: 16Gi\n"

    def test_append_line(self, session):
        report = AuditReport(session.audit_path)

        report.append_line("nvme: nvme not installed, skipping")

        assert report.read() == "nvme: nvme not installed, skipping\n"

    def test_appends_never_truncate(self, session):
        """Each append adds to the existing content."""
        report = AuditReport(session.audit_path)

        report.append_section("A", "a\n")
        report.append_section("B", "b\n")

        assert report.read() == "\n===== A =====\na\n\n===== B =====\nb\n"

    def test_read_missing_file(self, session):
        assert AuditReport(session.audit_path).read() == ""


class TestFinalize:
    """Tests for finalize."""

    def test_concatenates_log_then_audit(self, session):
        """Final report is log followed by audit, each under its header."""
        session.log_path.write_text("[STEP] Upgrade\n[OK] done\n")
        session.audit_path.write_text("\n===== CPU =====\nx86_64\n")

        path = finalize(session)

        assert path == session.final_report_path
        assert path.read_text() == (
            LOG_HEADER
            + "[STEP] Upgrade\n[OK] done\n"
            + AUDIT_HEADER
            + "\n===== CPU =====\nx86_64\n"
        )

    def test_sources_untouched(self, session):
        session.log_path.write_text("log\n")
        session.audit_path.write_text("audit\n")

        finalize(session)

        assert session.log_path.read_text() == "log\n"
        assert session.audit_path.read_text() == "audit\n"

    def test_second_call_writes_new_file(self, session):
        """Re-running finalize never overwrites an earlier final report."""
        session.log_path.write_text("log\n")
        session.audit_path.write_text("audit\n")

        first = finalize(session)
        second = finalize(session)

        assert first != second
        assert second.name == f"full_report_{session.timestamp}_1.txt"
        assert first.read_text() == second.read_text()

    def test_missing_audit_reads_empty(self, session):
        session.log_path.write_text("log only\n")

        path = finalize(session)

        assert path.read_text() == LOG_HEADER + "log only\n" + AUDIT_HEADER
