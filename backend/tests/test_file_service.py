"""
Showcase API: File Intake Unit Tests
=======================================

What:  Storage naming, disk writes and write-failure handling in FileIntake.
How:   Each test gets its own temporary uploads directory.

Test Strategy:
    ✅ Storage name is <epoch ms>_<original name>
    ✅ Directory components of the client filename are dropped
    ✅ Bytes on disk equal the uploaded bytes
    ✅ Write failures surface as FileStorageError
"""

import io
import re
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest
from starlette.datastructures import UploadFile

from showcase.exceptions import FileStorageError
from showcase.services.file_service import FileIntake


class TestStorageName:

    @pytest.fixture(autouse=True)
    def _service(self, temp_storage):
        self.service = FileIntake(temp_storage)

    def test_timestamp_prefix_and_original_name(self):
        name = self.service.generate_storage_name("logo.png")
        assert re.match(r"^\d{13}_logo\.png$", name)

    def test_spaces_and_case_are_kept(self):
        name = self.service.generate_storage_name("Team Photo.JPG")
        assert name.endswith("_Team Photo.JPG")

    def test_posix_path_components_dropped(self):
        name = self.service.generate_storage_name("../../etc/passwd")
        assert re.match(r"^\d+_passwd$", name)

    def test_windows_path_components_dropped(self):
        name = self.service.generate_storage_name("C:\\Users\\me\\logo.png")
        assert name.endswith("_logo.png")
        assert "\\" not in name

    def test_empty_filename(self):
        name = self.service.generate_storage_name("")
        assert re.match(r"^\d+_upload$", name)

    def test_url_for(self):
        assert self.service.url_for("1_a.png") == "/uploads/1_a.png"


class TestStore:

    def test_creates_missing_upload_dir(self, tmp_path):
        target = tmp_path / "nested" / "uploads"
        service = FileIntake(str(target))
        assert service.upload_dir == target.resolve()
        assert target.is_dir()

    @pytest.mark.asyncio
    async def test_save_bytes_writes_content(self, temp_storage, sample_image_bytes):
        service = FileIntake(temp_storage)

        path, url = await service.save_bytes("logo.png", sample_image_bytes)

        assert Path(path).read_bytes() == sample_image_bytes
        assert Path(path).parent == Path(temp_storage).resolve()
        assert url == f"/uploads/{Path(path).name}"

    @pytest.mark.asyncio
    async def test_store_upload_file(self, temp_storage, sample_image_bytes):
        service = FileIntake(temp_storage)
        upload = UploadFile(file=io.BytesIO(sample_image_bytes), filename="badge.png")

        url = await service.store(upload)

        stored = Path(temp_storage) / url.rsplit("/", 1)[1]
        assert stored.read_bytes() == sample_image_bytes
        assert upload.file.closed

    @pytest.mark.asyncio
    async def test_write_failure_raises_file_storage_error(self, temp_storage):
        service = FileIntake(temp_storage)
        shutil.rmtree(temp_storage)

        with pytest.raises(FileStorageError, match="Failed to save uploaded file"):
            await service.save_bytes("logo.png", b"data")

    @pytest.mark.asyncio
    async def test_store_copies_in_chunks(self, temp_storage, monkeypatch):
        monkeypatch.setattr("showcase.services.file_service.CHUNK_SIZE", 7)
        content = bytes(range(100))
        upload = UploadFile(file=io.BytesIO(content), filename="big.bin")
        service = FileIntake(temp_storage)

        with patch.object(upload, "read", side_effect=upload.read) as read:
            url = await service.store(upload)

        assert (Path(temp_storage) / url.rsplit("/", 1)[1]).read_bytes() == content
        assert read.await_count == 16
        assert all(c.args == (7,) for c in read.await_args_list)

    @pytest.mark.asyncio
    async def test_store_write_failure_closes_upload(self, temp_storage, sample_image_bytes):
        service = FileIntake(temp_storage)
        upload = UploadFile(file=io.BytesIO(sample_image_bytes), filename="badge.png")
        shutil.rmtree(temp_storage)

        with pytest.raises(FileStorageError, match="Failed to save uploaded file"):
            await service.store(upload)
        assert upload.file.closed
