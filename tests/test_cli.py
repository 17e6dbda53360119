"""Tests for the command line interface."""
import numpy as np
import pytest
from PIL import Image

from wmerase.cli import create_parser, main
from wmerase.raster_io import save_image, load_image


@pytest.fixture
def photo(tmp_path, make_image):
    """400x300 PNG on disk."""
    path = tmp_path / 'photo.png'
    save_image(make_image(400, 300, seed=3), path)
    return path


class TestParser:
    """Test argument parsing."""

    def test_defaults(self):
        args = create_parser().parse_args(['img.png'])

        assert args.passes == 8
        assert args.margin == 50
        assert args.grain == 2.0
        assert args.seed is None
        assert args.backend is None
        assert args.workers == 4
        assert not args.batch
        assert not args.no_auto

    def test_unknown_backend_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['img.png', '--backend', 'magic'])


class TestMain:
    """Test single-image runs."""

    def test_auto_detect_default_output(self, photo, capsys):
        assert main([str(photo), '--seed', '1']) == 0

        output = photo.with_name('photo_clean.png')
        assert output.exists()
        assert "Output saved" in capsys.readouterr().out

    def test_explicit_region(self, photo, make_image, tmp_path):
        out = tmp_path / 'result.png'

        code = main([str(photo), '-o', str(out), '--x', '10', '--y', '10',
                     '--width', '30', '--height', '20', '--seed', '1'])

        assert code == 0
        result = load_image(out)
        original = make_image(400, 300, seed=3)
        np.testing.assert_array_equal(result[40:], original[40:])
        assert not np.array_equal(result[10:30, 10:40], original[10:30, 10:40])

    def test_partial_region_is_usage_error(self, photo):
        with pytest.raises(SystemExit):
            main([str(photo), '--x', '10'])

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / 'missing.png')]) == 1
        assert "Input not found" in capsys.readouterr().err

    def test_no_region_without_auto(self, photo):
        assert main([str(photo), '--no-auto']) == 1

    def test_degenerate_region_writes_nothing(self, photo, tmp_path, capsys):
        out = tmp_path / 'result.png'

        code = main([str(photo), '-o', str(out), '--x', '1000', '--y', '1000',
                     '--width', '5', '--height', '5'])

        assert code == 0
        assert not out.exists()
        assert "SKIPPED_DEGENERATE" in capsys.readouterr().err

    def test_invalid_option(self, photo):
        assert main([str(photo), '--passes', '-1']) == 1

    def test_bad_env_seed(self, photo, monkeypatch):
        monkeypatch.setenv('WMERASE_SEED', 'xyz')

        assert main([str(photo)]) == 1

    def test_classical_backend(self, photo, tmp_path):
        out = tmp_path / 'telea.png'

        assert main([str(photo), '-o', str(out), '--backend', 'telea']) == 0
        assert out.exists()


class TestBatchMode:
    """Test --batch runs."""

    def test_folder(self, tmp_path, make_image, capsys):
        folder = tmp_path / 'in'
        folder.mkdir()
        save_image(make_image(300, 200, seed=1), folder / 'one.png')
        save_image(make_image(300, 200, seed=2), folder / 'two.png')

        code = main([str(folder), '--batch', '--workers', '1', '--seed', '0'])

        assert code == 0
        assert (folder / 'cleaned' / 'one_clean.png').exists()
        assert (folder / 'cleaned' / 'two_clean.png').exists()
        assert "Success: 2" in capsys.readouterr().out

    def test_failed_file_sets_exit_code(self, tmp_path, make_image):
        folder = tmp_path / 'in'
        folder.mkdir()
        save_image(make_image(300, 200, seed=1), folder / 'one.png')
        (folder / 'bad.png').write_bytes(b'junk')

        assert main([str(folder), '--batch', '--workers', '1']) == 1

    def test_batch_needs_folder(self, photo):
        assert main([str(photo), '--batch']) == 1

    def test_empty_folder(self, tmp_path):
        assert main([str(tmp_path), '--batch']) == 1


class TestDecodeFailures:
    """Test images Pillow refuses to decode."""

    def test_oversized_image_fails_cleanly(self, tmp_path, make_image, monkeypatch, capsys):
        path = tmp_path / 'huge.png'
        save_image(make_image(200, 200), path)
        monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 5000)

        assert main([str(path)]) == 1
        assert "Error" in capsys.readouterr().err
