"""
Tests for the audit ledger.
"""

import json
from pathlib import Path

from toolconf.core.persistence.audit import AuditEntry, AuditWriter


class TestAuditWriter:
    """Tests for the audit ledger."""

    def test_write_and_read(self, tmp_path: Path):
        writer = AuditWriter(path=tmp_path / "audit.ndjson")
        writer.write(
            AuditEntry(
                operation_id="op-001",
                operation_type="provision",
                tool="mvn",
                status="ok",
                steps_total=2,
                steps_succeeded=2,
            )
        )

        entries = writer.read_all()
        assert len(entries) == 1
        assert entries[0].operation_id == "op-001"
        assert entries[0].tool == "mvn"
        assert entries[0].status == "ok"

    def test_default_location(self, tmp_path: Path):
        writer = AuditWriter(workspace_root=tmp_path)
        assert writer.path == tmp_path / ".state" / "audit.ndjson"

    def test_read_recent(self, tmp_path: Path):
        writer = AuditWriter(path=tmp_path / "audit.ndjson")
        for i in range(10):
            writer.write(AuditEntry(operation_id=f"op-{i:03d}"))

        recent = writer.read_recent(3)
        assert [e.operation_id for e in recent] == ["op-007", "op-008", "op-009"]

    def test_read_empty_ledger(self, tmp_path: Path):
        assert AuditWriter(path=tmp_path / "nonexistent.ndjson").read_all() == []

    def test_corrupt_lines_skipped(self, tmp_path: Path):
        path = tmp_path / "audit.ndjson"
        path.write_text(
            '{"operation_id": "good-1", "operation_type": "provision"}\n'
            "this is not json\n"
            '{"operation_id": "good-2", "steps_total": "many"}\n'
            '{"operation_id": "good-3", "operation_type": "provision"}\n'
        )
        entries = AuditWriter(path=path).read_all()
        assert [e.operation_id for e in entries] == ["good-1", "good-3"]

    def test_creates_parent_directories(self, tmp_path: Path):
        writer = AuditWriter(path=tmp_path / "deep" / "nested" / "audit.ndjson")
        writer.write(AuditEntry(operation_id="test"))
        assert writer.path.is_file()

    def test_ndjson_format(self, tmp_path: Path):
        path = tmp_path / "audit.ndjson"
        writer = AuditWriter(path=path)
        writer.write(AuditEntry(operation_id="op-1", skipped=["settings-file:already-present"]))
        writer.write(AuditEntry(operation_id="op-2"))

        lines = path.read_text().strip().split("\n")
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["skipped"] == ["settings-file:already-present"]

    def test_unwritable_ledger_does_not_raise(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a folder")
        writer = AuditWriter(path=blocker / "audit.ndjson")
        writer.write(AuditEntry(operation_id="lost"))
        assert writer.read_all() == []
