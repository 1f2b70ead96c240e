"""
Canvas geometry and font-size fitting.
"""

# Standard Library
import typing

# local repo modules
import image_noter as imn
import image_noter.config


LayoutOptions = imn.config.LayoutOptions
CanvasPlan = imn.config.CanvasPlan
LinePlacement = imn.config.LinePlacement

MIN_FONT_SIZE = imn.config.MIN_FONT_SIZE
MAX_FONT_SIZE = imn.config.MAX_FONT_SIZE
BOTTOM_SIDE_PADDING = imn.config.BOTTOM_SIDE_PADDING
BOTTOM_MARGIN_RATIO = imn.config.BOTTOM_MARGIN_RATIO
BORDER_ALL = imn.config.BORDER_ALL
BORDER_STYLES = imn.config.BORDER_STYLES

MeasureFunc = typing.Callable[[str, int], float]


class InvalidLayoutError(ValueError):
	"""
	Raised when image dimensions or layout options are malformed.
	"""


#============================================
def _is_positive_int(value) -> bool:
	return isinstance(value, int) and not isinstance(value, bool) and value > 0


#============================================
def validate_layout(
	source_width: int,
	source_height: int,
	lines: list[str],
	options: LayoutOptions,
) -> str:
	"""
	Check layout preconditions.

	Args:
		source_width: Source image width in pixels.
		source_height: Source image height in pixels.
		lines: Caption lines.
		options: LayoutOptions.

	Returns:
		Normalized border style.
	"""
	if lines is None:
		raise InvalidLayoutError("lines must not be None")
	if options is None:
		raise InvalidLayoutError("options must not be None")
	if not _is_positive_int(source_width) or not _is_positive_int(source_height):
		raise InvalidLayoutError(
			f"image size must be positive, got {source_width}x{source_height}"
		)
	if not _is_positive_int(options.line_height):
		raise InvalidLayoutError(f"line height must be positive, got {options.line_height}")
	border_style = imn.config.normalize_border_style(options.border_style)
	if border_style not in BORDER_STYLES:
		raise InvalidLayoutError(f"unknown border style: {options.border_style!r}")
	return border_style


#============================================
def compute_bottom_margin(line_height: int) -> int:
	"""
	Compute the trailing gap below the last caption line.
	"""
	return int(round(line_height * BOTTOM_MARGIN_RATIO))


#============================================
def choose_font_size(text: str, max_width: float, measure: MeasureFunc) -> int:
	"""
	Pick the largest font size whose rendered width fits.

	Sizes are scanned from MAX_FONT_SIZE down to MIN_FONT_SIZE. Text that
	overflows even at the minimum keeps the minimum size; it is never
	wrapped or truncated.

	Args:
		text: Line text.
		max_width: Available width in pixels.
		measure: Callable returning the text width at a font size.

	Returns:
		Font size in pixels.
	"""
	for size in range(MAX_FONT_SIZE, MIN_FONT_SIZE - 1, -1):
		if measure(text, size) <= max_width:
			return size
	return MIN_FONT_SIZE


#============================================
def identity_plan(source_width: int, source_height: int) -> CanvasPlan:
	"""
	Build the plan used when there is nothing to draw.
	"""
	return CanvasPlan(
		width=source_width,
		height=source_height,
		top_border=0,
		bottom_border=0,
		side_padding=0,
		image_x=0,
		image_y=0,
		text_top=source_height,
	)


#============================================
def plan_canvas(
	source_width: int,
	source_height: int,
	lines: list[str],
	options: LayoutOptions,
	measure: MeasureFunc,
) -> CanvasPlan:
	"""
	Compute border geometry, canvas size and text placement.

	Args:
		source_width: Source image width in pixels.
		source_height: Source image height in pixels.
		lines: Caption lines, possibly empty.
		options: LayoutOptions.
		measure: Callable returning the text width at a font size.

	Returns:
		CanvasPlan.
	"""
	border_style = validate_layout(source_width, source_height, lines, options)
	if not lines:
		return identity_plan(source_width, source_height)

	line_height = options.line_height
	total_text_height = line_height * len(lines)
	bottom_margin = compute_bottom_margin(line_height)

	if border_style == BORDER_ALL:
		top_border = line_height
		side_padding = line_height
		bottom_border = total_text_height + line_height + bottom_margin
		width = source_width + 2 * side_padding
		image_x = side_padding
	else:
		top_border = 0
		side_padding = BOTTOM_SIDE_PADDING
		bottom_border = total_text_height + side_padding + bottom_margin
		width = source_width
		image_x = 0

	height = source_height + top_border + bottom_border
	text_top = top_border + source_height + side_padding
	center_x = width // 2
	max_text_width = width - 2 * side_padding

	placements: list[LinePlacement] = []
	for index, text in enumerate(lines):
		font_size = choose_font_size(text, max_text_width, measure)
		baseline_y = text_top + index * line_height + font_size / 2.0
		placements.append(
			LinePlacement(
				text=text,
				font_size=font_size,
				baseline_y=baseline_y,
				center_x=center_x,
			)
		)

	return CanvasPlan(
		width=width,
		height=height,
		top_border=top_border,
		bottom_border=bottom_border,
		side_padding=side_padding,
		image_x=image_x,
		image_y=top_border,
		text_top=text_top,
		lines=placements,
	)
