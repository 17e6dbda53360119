"""Tests for batch processing."""
from pathlib import Path

import pytest
from PIL import Image

from wmerase.types import Selection, InpaintConfig
from wmerase.raster_io import save_image, load_image
from wmerase.batch import (
    ImageStatus,
    find_images,
    output_path_for,
    process_file,
    process_batch,
)


@pytest.fixture
def image_folder(tmp_path, make_image):
    """Folder with two images, one corrupt file and one non-image."""
    folder = tmp_path / 'in'
    folder.mkdir()
    save_image(make_image(60, 40, seed=1), folder / 'b.png')
    save_image(make_image(60, 40, seed=2), folder / 'a.png')
    (folder / 'c.png').write_bytes(b'broken')
    (folder / 'notes.txt').write_text('skip me')
    return folder


class TestFindImages:
    """Test input discovery."""

    def test_sorted_and_filtered(self, image_folder):
        names = [p.name for p in find_images(image_folder)]

        assert names == ['a.png', 'b.png', 'c.png']

    def test_custom_extensions(self, image_folder):
        assert [p.name for p in find_images(image_folder, {'.txt'})] == ['notes.txt']

    def test_missing_folder(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_images(tmp_path / 'missing')


class TestProcessFile:
    """Test single file processing."""

    def test_output_name(self):
        assert output_path_for(Path('x/photo.jpg'), Path('out')) == Path('out/photo_clean.jpg')

    def test_completed(self, image_folder, tmp_path):
        out = tmp_path / 'a_clean.png'

        _, status, _ = process_file(
            str(image_folder / 'a.png'), str(out), InpaintConfig(seed=0), Selection(10, 10, 20, 10)
        )

        assert status == ImageStatus.COMPLETED.value
        assert load_image(out).shape == (40, 60, 4)

    def test_skipped(self, image_folder, tmp_path):
        out = tmp_path / 'a_clean.png'

        _, status, message = process_file(
            str(image_folder / 'a.png'), str(out), InpaintConfig(), Selection(0, 0, 60, 40)
        )

        assert status == ImageStatus.SKIPPED.value
        assert message == 'SKIPPED_EMPTY_BANK'
        assert not out.exists()

    def test_error(self, image_folder, tmp_path):
        _, status, message = process_file(
            str(image_folder / 'c.png'), str(tmp_path / 'c.png'), InpaintConfig()
        )

        assert status == ImageStatus.ERROR.value
        assert message.startswith('DecodeError')


class TestProcessBatch:
    """Test whole-folder runs."""

    def test_sequential(self, image_folder, tmp_path):
        seen = []
        out = tmp_path / 'out'

        report = process_batch(
            find_images(image_folder), out, InpaintConfig(seed=0), Selection(10, 10, 20, 10),
            max_workers=1, on_item=lambda item, i, total: seen.append((item.input.name, i, total))
        )

        assert report.total == 3
        assert report.success == 2
        assert report.failed == 1
        assert report.skipped == 0
        assert seen == [('a.png', 1, 3), ('b.png', 2, 3), ('c.png', 3, 3)]
        assert (out / 'a_clean.png').exists()
        assert (out / 'b_clean.png').exists()
        assert not (out / 'c_clean.png').exists()

    def test_worker_processes(self, image_folder, tmp_path):
        report = process_batch(
            find_images(image_folder), tmp_path / 'out', InpaintConfig(seed=0),
            Selection(10, 10, 20, 10), max_workers=2
        )

        assert report.success == 2
        assert report.failed == 1
        assert all(item.status is not ImageStatus.PROCESSING for item in report.items)

    def test_empty_input(self, tmp_path):
        report = process_batch([], tmp_path / 'out')

        assert report.total == 0
        assert (tmp_path / 'out').is_dir()

    def test_oversized_file_does_not_stop_batch(self, tmp_path, make_image, monkeypatch):
        folder = tmp_path / 'in'
        folder.mkdir()
        save_image(make_image(60, 40, seed=1), folder / 'a.png')
        save_image(make_image(200, 200, seed=2), folder / 'b.png')
        monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 5000)

        report = process_batch(
            find_images(folder), tmp_path / 'out', InpaintConfig(seed=0),
            Selection(10, 10, 20, 10), max_workers=1
        )

        statuses = {item.input.name: item for item in report.items}
        assert statuses['a.png'].status is ImageStatus.COMPLETED
        assert statuses['b.png'].status is ImageStatus.ERROR
        assert statuses['b.png'].message.startswith('DecodeError')
