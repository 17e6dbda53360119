"""Batch watermark removal over many image files."""
import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Tuple

from wmerase.types import InpaintConfig, InpaintError, Selection
from wmerase.raster_io import load_image, save_image
from wmerase.strategies.router import inpaint_selection

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.gif', '.tiff', '.webp'}
OUTPUT_SUFFIX = "_clean"


class ImageStatus(Enum):
    """Lifecycle of one file in a batch."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class BatchItem:
    """One file of a batch and what happened to it."""
    input: Path
    output: Path
    status: ImageStatus = ImageStatus.PENDING
    message: str = ""


@dataclass
class BatchReport:
    """Summary of a batch run."""
    items: List[BatchItem] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return len(self.items)

    def count(self, status: ImageStatus) -> int:
        return sum(1 for item in self.items if item.status is status)

    @property
    def success(self) -> int:
        return self.count(ImageStatus.COMPLETED)

    @property
    def skipped(self) -> int:
        return self.count(ImageStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(ImageStatus.ERROR)


def find_images(folder: Path, extensions: Optional[Set[str]] = None) -> List[Path]:
    """Get all image files from a folder."""
    if extensions is None:
        extensions = IMAGE_EXTENSIONS

    folder = Path(folder)
    if not folder.exists():
        raise FileNotFoundError(f"Input folder not found: {folder}")

    images = [
        path for path in folder.iterdir()
        if path.is_file() and path.suffix.lower() in extensions
    ]
    return sorted(images)


def output_path_for(input_path: Path, output_folder: Path) -> Path:
    """Output file for an input: <stem>_clean<suffix> inside output_folder."""
    return Path(output_folder) / f"{input_path.stem}{OUTPUT_SUFFIX}{input_path.suffix}"


def process_file(
    input_path_str: str,
    output_path_str: str,
    config: InpaintConfig,
    selection: Optional[Selection] = None
) -> Tuple[str, str, str]:
    """
    Inpaint a single file.

    Module-level so it can run in a worker process.

    Returns:
        Tuple of (input_path_str, status value, message)
    """
    try:
        image = load_image(input_path_str)
        result = inpaint_selection(image, selection, config)
        if not result.processed:
            return input_path_str, ImageStatus.SKIPPED.value, result.status.name
        save_image(result.image, output_path_str)
        return input_path_str, ImageStatus.COMPLETED.value, f"Done in {result.elapsed:.2f}s"
    except (InpaintError, OSError) as e:
        return input_path_str, ImageStatus.ERROR.value, f"{type(e).__name__}: {str(e)[:200]}"


def process_batch(
    inputs: Iterable[Path],
    output_folder: Path,
    config: Optional[InpaintConfig] = None,
    selection: Optional[Selection] = None,
    max_workers: int = 4,
    on_item: Optional[Callable[[BatchItem, int, int], None]] = None
) -> BatchReport:
    """
    Remove the watermark from every input file.

    Each file gets its own buffer and is processed independently; a failing
    file is recorded as ERROR and never stops the batch.

    Args:
        inputs: Image files
        output_folder: Folder for the cleaned files (created if missing)
        config: Processing options shared by every file
        selection: Rectangle used for every file (auto-detected per file if None)
        max_workers: Worker processes; 1 processes files in this process
        on_item: Called with (item, index, total) as each file finishes

    Returns:
        BatchReport
    """
    config = config or InpaintConfig()
    output_folder = Path(output_folder)
    output_folder.mkdir(parents=True, exist_ok=True)

    items = {
        str(path): BatchItem(Path(path), output_path_for(Path(path), output_folder))
        for path in inputs
    }
    report = BatchReport(items=list(items.values()))
    total = len(items)
    if total == 0:
        return report

    logger.info(f"Processing {total} images into {output_folder}")
    start_time = time.time()

    def finish(index: int, input_str: str, status: str, message: str) -> None:
        item = items[input_str]
        item.status = ImageStatus(status)
        item.message = message
        logger.info(f"[{index}/{total}] {item.status.value.upper()} {item.input.name}: {message}")
        if on_item is not None:
            on_item(item, index, total)

    workers = min(total, max_workers)
    if workers <= 1:
        for i, (input_str, item) in enumerate(items.items(), start=1):
            item.status = ImageStatus.PROCESSING
            finish(i, *process_file(input_str, str(item.output), config, selection))
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = []
            for input_str, item in items.items():
                item.status = ImageStatus.PROCESSING
                futures.append(executor.submit(
                    process_file, input_str, str(item.output), config, selection
                ))
            for i, future in enumerate(as_completed(futures), start=1):
                finish(i, *future.result())

    report.elapsed = time.time() - start_time
    logger.info(
        f"Batch finished in {report.elapsed:.2f}s: {report.success} ok, "
        f"{report.skipped} skipped, {report.failed} failed"
    )
    return report
