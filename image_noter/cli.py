"""
CLI entry points for captioning a directory of JPG images.
"""

# Standard Library
import argparse
import pathlib
import sys
import time

# local repo modules
import image_noter as imn
import image_noter.config
import image_noter.exif_lib
import image_noter.formatter
import image_noter.render


AnnotationConfig = imn.config.AnnotationConfig
LayoutOptions = imn.config.LayoutOptions
BatchResult = imn.config.BatchResult

DEFAULT_LINE_HEIGHT = imn.config.DEFAULT_LINE_HEIGHT
DEFAULT_OUTPUT_QUALITY = imn.config.DEFAULT_OUTPUT_QUALITY
DEFAULT_SUBFOLDER = imn.config.DEFAULT_SUBFOLDER
DEFAULT_FONT_PATHS = imn.config.DEFAULT_FONT_PATHS
OUTPUT_PREFIX = imn.config.OUTPUT_PREFIX
INPUT_SUFFIX = imn.config.INPUT_SUFFIX
PROGRESS_BAR_WIDTH = imn.config.PROGRESS_BAR_WIDTH

EXAMPLES = """examples:
  Process all images in the current directory:
    image-noter --input .

  Process images with a full border and custom line height:
    image-noter --input ./photos --border all --lineheight 80
"""


#============================================
def build_parser() -> argparse.ArgumentParser:
	"""
	Build the argument parser.

	Returns:
		ArgumentParser.
	"""
	parser = argparse.ArgumentParser(
		prog="image-noter",
		description="Embed EXIF metadata as a caption border onto JPG images.",
		epilog=EXAMPLES,
		formatter_class=argparse.RawDescriptionHelpFormatter,
	)

	io_group = parser.add_argument_group("Input/Output")
	io_group.add_argument("--input", dest="input_dir", default=None, help="Directory containing JPG images (required).")
	io_group.add_argument("--output", dest="output_dir", default=None, help="Output directory (default: input_directory/images with exif).")
	io_group.add_argument("--subfolder", dest="subfolder", default=DEFAULT_SUBFOLDER, help="Output subfolder name used when --output is not given.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("--lineheight", dest="line_height", type=int, default=DEFAULT_LINE_HEIGHT, help="Text line height in pixels.")
	layout_group.add_argument("--border", dest="border_style", type=str.lower, choices=("bottom", "all"), default="bottom", help="Border style.")
	layout_group.add_argument("--font", dest="fonts", action="append", default=[], help="TrueType font path, may be repeated.")

	output_group = parser.add_argument_group("Encoding")
	output_group.add_argument("--quality", dest="quality", type=int, default=DEFAULT_OUTPUT_QUALITY, help="JPEG output quality (1-100).")
	output_group.add_argument("--preserve-exif", dest="preserve_exif", action="store_true", help="Copy the source EXIF block to the output.")
	output_group.add_argument("--no-preserve-exif", dest="preserve_exif", action="store_false", help="Drop the source EXIF block.")

	parser.set_defaults(preserve_exif=True)
	return parser


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace | None:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list; sys.argv[1:] when None.

	Returns:
		Parsed namespace, or None when help was shown for an empty command line.
	"""
	if argv is None:
		argv = sys.argv[1:]
	parser = build_parser()
	if not argv:
		parser.print_help()
		return None
	args = parser.parse_args(argv)
	if not args.input_dir:
		parser.error("the --input directory is required")
	if args.line_height <= 0:
		parser.error(f"--lineheight must be a positive integer, got {args.line_height}")
	return args


#============================================
def build_config(args: argparse.Namespace) -> AnnotationConfig:
	"""
	Build the annotation config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		AnnotationConfig.
	"""
	output_dir = args.output_dir
	if output_dir is None:
		output_dir = str(pathlib.Path(args.input_dir) / args.subfolder)
	layout = LayoutOptions(
		line_height=args.line_height,
		border_style=args.border_style.upper(),
		output_quality=args.quality,
	)
	return AnnotationConfig(
		input_dir=args.input_dir,
		output_dir=output_dir,
		layout=layout,
		font_paths=list(args.fonts) + DEFAULT_FONT_PATHS,
		preserve_exif=args.preserve_exif,
	)


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def gather_jpg_paths(input_dir: pathlib.Path) -> list[pathlib.Path]:
	"""
	List JPG files directly inside a directory.

	Args:
		input_dir: Directory to scan (not recursive).

	Returns:
		Sorted list of paths.
	"""
	paths = [
		path for path in input_dir.iterdir()
		if path.is_file() and path.suffix.lower() == INPUT_SUFFIX
	]
	return sorted(paths)


#============================================
def annotate_file(
	input_path: pathlib.Path,
	output_path: pathlib.Path,
	config: AnnotationConfig,
) -> tuple[int, int]:
	"""
	Caption one image and write the JPEG result.

	Args:
		input_path: Source image path.
		output_path: Destination path.
		config: AnnotationConfig.

	Returns:
		Output (width, height).
	"""
	record = imn.exif_lib.extract_metadata(input_path)
	lines = imn.formatter.format_display_lines(record)
	source = imn.render.decode_image(input_path)
	result = imn.render.render_caption(source, lines, config.layout, config.font_paths)
	exif = None
	if config.preserve_exif:
		exif = imn.render.build_output_exif(source)
	data = imn.render.encode_image(result, config.layout.output_quality, exif)
	output_path.write_bytes(data)
	return result.size


#============================================
def run_pipeline(config: AnnotationConfig) -> BatchResult | None:
	"""
	Caption every JPG in the input directory.

	Args:
		config: AnnotationConfig.

	Returns:
		BatchResult, or None when the input directory does not exist.
	"""
	input_dir = pathlib.Path(config.input_dir)
	output_dir = pathlib.Path(config.output_dir)
	print("ImageNoter pipeline")
	print(f"Input directory: {input_dir}")
	print(f"Output directory: {output_dir}")
	print(f"Line height: {config.layout.line_height}")
	print(f"Border: {config.layout.border_style}")
	print(f"Quality: {config.layout.output_quality}")

	if not input_dir.is_dir():
		print(f"Error: Input directory '{input_dir}' does not exist.")
		return None

	output_dir.mkdir(parents=True, exist_ok=True)
	paths = gather_jpg_paths(input_dir)
	result = BatchResult(
		total_files=len(paths),
		processed_files=0,
		failed_files=0,
		output_dir=str(output_dir),
	)
	if not paths:
		print("No JPG files found in the input directory.")
		return result

	start_time = time.perf_counter()
	total = len(paths)
	print_progress("Images", 0, total)
	for index, path in enumerate(paths, start=1):
		output_path = output_dir / f"{OUTPUT_PREFIX}{path.name}"
		try:
			annotate_file(path, output_path, config)
		except Exception as error:
			result.failed_files += 1
			result.failures.append(f"{path.name}: {error}")
		else:
			result.processed_files += 1
		print_progress("Images", index, total)
	print()
	for message in result.failures:
		print(f"Error: {message}")

	total_time = time.perf_counter() - start_time
	print(f"Images processed: {result.processed_files}")
	print(f"Images failed: {result.failed_files}")
	print(f"Timing: total={total_time:.2f}s")
	print(f"Processing complete. Output files saved to: {output_dir}")
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	if args is None:
		return
	config = build_config(args)
	run_pipeline(config)
