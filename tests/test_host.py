"""Tests for the desktop save host, driven through the real dispatcher."""

from pathlib import Path

import pytest

from laser_etch.composer import compose
from laser_etch.exporter import DOWNLOAD_FILENAME, ExportStatus, export_document, to_data_uri
from laser_etch.host import HostError, LocalSaveHost


def test_object_url_is_a_private_temp_file(tmp_path):
    host = LocalSaveHost(tmp_path / "out")
    url = host.create_object_url(b"<svg/>", "image/svg+xml")

    assert url.startswith("file:")
    assert url.endswith(".svg")
    assert host.live_urls == [url]
    temp_file = host._object_urls[url]
    assert temp_file.read_bytes() == b"<svg/>"

    host.revoke_object_url(url)
    assert host.live_urls == []
    assert not temp_file.exists()


def test_revoking_unknown_url_is_ignored(tmp_path):
    host = LocalSaveHost(tmp_path)
    host.revoke_object_url("file:///nowhere.svg")
    assert host.live_urls == []


def test_click_requires_attached_link(tmp_path):
    host = LocalSaveHost(tmp_path)
    link = host.create_link(to_data_uri("<svg/>"), DOWNLOAD_FILENAME)
    host.remove_link(link)
    with pytest.raises(HostError):
        host.click(link)


def test_click_decodes_data_uri(tmp_path):
    host = LocalSaveHost(tmp_path / "nested" / "dir")
    document = compose("a<b & 激光")
    link = host.create_link(to_data_uri(document), "out.svg")

    saved = host.click(link)
    assert saved == tmp_path / "nested" / "dir" / "out.svg"
    assert saved.read_text(encoding="utf-8") == document


def test_export_via_object_url_writes_file_and_cleans_up(tmp_path):
    host = LocalSaveHost(tmp_path)
    document = compose("LASER")
    outcome = export_document(document, host)

    assert outcome.status is ExportStatus.PRIMARY
    assert outcome.saved_path == tmp_path / DOWNLOAD_FILENAME
    assert outcome.saved_path.read_text(encoding="utf-8") == document
    assert host.live_urls == []
    assert host.attached_links == []


def test_export_falls_back_to_data_uri_when_object_url_fails(tmp_path, monkeypatch):
    host = LocalSaveHost(tmp_path)
    created = []
    original_create = host.create_object_url

    def create_then_break(payload, mime_type):
        url = original_create(payload, mime_type)
        created.append(host._object_urls[url])
        host._object_urls[url].unlink()
        return url

    monkeypatch.setattr(host, "create_object_url", create_then_break)
    document = compose("LASER")
    outcome = export_document(document, host)

    assert outcome.status is ExportStatus.FALLBACK
    assert outcome.saved_path.read_text(encoding="utf-8") == document
    assert host.live_urls == []
    assert host.attached_links == []
    assert created and not created[0].exists()


def test_export_reaches_manual_copy_when_directory_is_unwritable(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    prompts = []
    host = LocalSaveHost(blocker / "out", prompt=lambda message, doc: prompts.append((message, doc)))
    document = compose("LASER")

    outcome = export_document(document, host)

    assert outcome.status is ExportStatus.MANUAL_COPY
    assert prompts == [("Unable to download automatically. Copy SVG:", document)]
    assert host.live_urls == []
    assert host.attached_links == []


def test_missing_document_uses_alert_callback(tmp_path):
    alerts = []
    host = LocalSaveHost(tmp_path, alert=alerts.append)
    outcome = export_document("", host)

    assert outcome.status is ExportStatus.MISSING_DOCUMENT
    assert alerts == ["Generate an SVG first"]
    assert list(Path(tmp_path).iterdir()) == []
