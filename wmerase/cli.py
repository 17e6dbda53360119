"""Command line interface for wmerase."""
import argparse
import logging
import sys
from pathlib import Path

from wmerase.types import InpaintConfig, InpaintError, Selection
from wmerase.raster_io import load_image, save_image
from wmerase.batch import find_images, process_batch, OUTPUT_SUFFIX
from wmerase.strategies import available_strategies, inpaint_selection


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='wmerase',
        description='Erase a rectangular watermark by synthesizing texture from its surroundings'
    )

    parser.add_argument(
        'input',
        type=str,
        help='Input image path (or folder with --batch)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        help=f'Output path (default: input name with {OUTPUT_SUFFIX} suffix)'
    )

    region = parser.add_argument_group('region', 'Rectangle to erase (default: auto-detect)')
    region.add_argument('--x', type=int, help='Left edge in pixels')
    region.add_argument('--y', type=int, help='Top edge in pixels')
    region.add_argument('--width', type=int, help='Width in pixels')
    region.add_argument('--height', type=int, help='Height in pixels')
    region.add_argument(
        '--no-auto',
        action='store_true',
        help='Disable the bottom-right auto-detect guess'
    )

    parser.add_argument(
        '--passes',
        type=int,
        default=8,
        help='Smoothing passes (default: 8)'
    )

    parser.add_argument(
        '--margin',
        type=int,
        default=50,
        help='Texture sampling margin around the region (default: 50)'
    )

    parser.add_argument(
        '--grain',
        type=float,
        default=2.0,
        help='Grain noise strength (default: 2.0)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible output'
    )

    parser.add_argument(
        '--backend',
        type=str,
        choices=available_strategies(),
        default=None,
        help='Inpainting backend (default: $WMERASE_BACKEND or texture)'
    )

    parser.add_argument(
        '--batch',
        action='store_true',
        help='Treat input as a folder and process every image in it'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=4,
        help='Worker processes for --batch (default: 4)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Debug logging'
    )

    return parser


def _selection_from_args(parsed_args, parser: argparse.ArgumentParser):
    values = [parsed_args.x, parsed_args.y, parsed_args.width, parsed_args.height]
    if all(v is None for v in values):
        return None
    if any(v is None for v in values):
        parser.error('--x, --y, --width and --height must be given together')
    return Selection(*values)


def _print_progress():
    """Progress sink printing every 10% step."""
    state = {'next': 10.0}

    def sink(percent: float) -> None:
        while percent >= state['next']:
            print(f"  {state['next']:.0f}%")
            state['next'] += 10.0
    return sink


def main(args=None):
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    selection = _selection_from_args(parsed_args, parser)

    # Resolve input path
    input_path = Path(parsed_args.input)
    if not input_path.exists():
        print(f"Error: Input not found: {input_path}", file=sys.stderr)
        return 1

    # Create configuration
    try:
        overrides = dict(
            auto_detect=not parsed_args.no_auto,
            passes=parsed_args.passes,
            margin=parsed_args.margin,
            grain_strength=parsed_args.grain,
        )
        if parsed_args.seed is not None:
            overrides['seed'] = parsed_args.seed
        if parsed_args.backend:
            overrides['backend'] = parsed_args.backend
        config = InpaintConfig.from_env(**overrides).validate()
    except InpaintError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed_args.batch:
        return _run_batch(input_path, parsed_args, config, selection)

    # Determine output path
    if parsed_args.output:
        output_path = Path(parsed_args.output)
    else:
        output_path = input_path.with_name(f"{input_path.stem}{OUTPUT_SUFFIX}{input_path.suffix}")

    try:
        print(f"Processing: {input_path}")
        image = load_image(input_path)
        print(f"  Image: {image.shape[1]}x{image.shape[0]}")
        print(f"  Backend: {config.backend}")

        result = inpaint_selection(image, selection, config, progress=_print_progress())

        if not result.processed:
            print(f"Warning: nothing erased ({result.status.name})", file=sys.stderr)
            return 0

        if result.selection is not None:
            print(f"  Region: {result.selection.as_dict()}")
        save_image(result.image, output_path)
        print(f"  Output saved: {output_path}")
        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except InpaintError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _run_batch(input_path: Path, parsed_args, config: InpaintConfig, selection) -> int:
    if not input_path.is_dir():
        print(f"Error: --batch needs a folder, got {input_path}", file=sys.stderr)
        return 1

    output_folder = Path(parsed_args.output) if parsed_args.output else input_path / 'cleaned'
    images = find_images(input_path)
    if not images:
        print(f"Error: No images found in: {input_path}", file=sys.stderr)
        return 1

    print(f"Found {len(images)} images to process")
    print(f"Output folder: {output_folder.absolute()}")
    print("-" * 60)

    def on_item(item, index, total):
        print(f"[{index}/{total}] [{item.status.value.upper()}] {item.input.name}: {item.message}")

    report = process_batch(
        images, output_folder, config, selection,
        max_workers=parsed_args.workers, on_item=on_item
    )

    print("-" * 60)
    print(f"Completed in {report.elapsed:.2f}s")
    print(f"Total: {report.total}")
    print(f"Success: {report.success}")
    print(f"Skipped: {report.skipped}")
    print(f"Failed: {report.failed}")
    return 0 if report.failed == 0 else 1


if __name__ == '__main__':
    sys.exit(main())
