"""
Caption rendering and JPEG encode/decode.
"""

# Standard Library
import io
import pathlib

# PIP3 modules
import PIL.ExifTags
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont

# local repo modules
import image_noter as imn
import image_noter.config
import image_noter.layout


LayoutOptions = imn.config.LayoutOptions
CanvasPlan = imn.config.CanvasPlan
InvalidLayoutError = imn.layout.InvalidLayoutError

BACKGROUND_COLOR = imn.config.BACKGROUND_COLOR
TEXT_COLOR = imn.config.TEXT_COLOR
DEFAULT_FONT_PATHS = imn.config.DEFAULT_FONT_PATHS
MIN_QUALITY = imn.config.MIN_QUALITY
MAX_QUALITY = imn.config.MAX_QUALITY


#============================================
def load_font(font_paths: list[str] | None, size: int) -> PIL.ImageFont.FreeTypeFont:
	"""
	Load the first usable TrueType font at the given size.

	Args:
		font_paths: Candidate font file paths or names.
		size: Font size in pixels.

	Returns:
		Font object; Pillow's scalable default font when none load.
	"""
	if font_paths is None:
		font_paths = DEFAULT_FONT_PATHS
	for path in font_paths:
		if not path:
			continue
		try:
			return PIL.ImageFont.truetype(path, size=size)
		except OSError:
			continue
	return PIL.ImageFont.load_default(size=size)


#============================================
def clamp_quality(value: int) -> int:
	"""
	Clamp a JPEG quality into the encoder range.
	"""
	return max(MIN_QUALITY, min(MAX_QUALITY, int(value)))


#============================================
def decode_image(path: pathlib.Path | str) -> PIL.Image.Image:
	"""
	Decode an image file into an RGB bitmap.

	The returned image keeps the source info dict, including any raw
	EXIF block.

	Args:
		path: Image path.

	Returns:
		RGB PIL image.
	"""
	with PIL.Image.open(path) as image:
		image.load()
		info = dict(image.info)
		rgb = image.convert("RGB")
	rgb.info.update(info)
	return rgb


#============================================
def encode_image(image: PIL.Image.Image, quality: int, exif: bytes | None = None) -> bytes:
	"""
	Encode an image as JPEG.

	Args:
		image: PIL image.
		quality: Requested quality, clamped into 1..100.
		exif: Optional raw EXIF block to embed.

	Returns:
		JPEG bytes.
	"""
	buffer = io.BytesIO()
	save_kwargs = {"format": "JPEG", "quality": clamp_quality(quality)}
	if exif:
		save_kwargs["exif"] = exif
	image.convert("RGB").save(buffer, **save_kwargs)
	return buffer.getvalue()


#============================================
def build_output_exif(source: PIL.Image.Image) -> bytes | None:
	"""
	Build the EXIF block carried over to the captioned output.

	The orientation is reset to normal since the canvas is written upright.

	Args:
		source: Decoded source image.

	Returns:
		Raw EXIF bytes, or None when the source has none.
	"""
	if not source.info.get("exif"):
		return None
	exif = source.getexif()
	if PIL.ExifTags.Base.Orientation in exif:
		exif[PIL.ExifTags.Base.Orientation] = 1
	return exif.tobytes()


#============================================
def plan_for_image(
	source: PIL.Image.Image,
	lines: list[str],
	options: LayoutOptions,
	font_paths: list[str] | None = None,
) -> tuple[CanvasPlan, dict[int, PIL.ImageFont.FreeTypeFont]]:
	"""
	Compute the canvas plan for an image, measuring with real fonts.

	Args:
		source: Source PIL image.
		lines: Caption lines.
		options: LayoutOptions.
		font_paths: Candidate font paths.

	Returns:
		Tuple of (CanvasPlan, fonts keyed by size).
	"""
	if source is None:
		raise InvalidLayoutError("source image must not be None")
	fonts: dict[int, PIL.ImageFont.FreeTypeFont] = {}

	def get_font(size: int) -> PIL.ImageFont.FreeTypeFont:
		if size not in fonts:
			fonts[size] = load_font(font_paths, size)
		return fonts[size]

	def measure(text: str, size: int) -> float:
		return get_font(size).getlength(text)

	width, height = source.size
	plan = imn.layout.plan_canvas(width, height, lines, options, measure)
	for placement in plan.lines:
		get_font(placement.font_size)
	return plan, fonts


#============================================
def render_caption(
	source: PIL.Image.Image,
	lines: list[str],
	options: LayoutOptions,
	font_paths: list[str] | None = None,
) -> PIL.Image.Image:
	"""
	Render caption lines into a border around a copy of the source image.

	Args:
		source: Source PIL image.
		lines: Caption lines, possibly empty.
		options: LayoutOptions.
		font_paths: Candidate font paths.

	Returns:
		New RGB PIL image; a plain copy of the source when lines is empty.
	"""
	plan, fonts = plan_for_image(source, lines, options, font_paths)
	rgb_source = source.convert("RGB")
	if not plan.lines:
		return rgb_source

	canvas = PIL.Image.new("RGB", (plan.width, plan.height), BACKGROUND_COLOR)
	canvas.paste(rgb_source, (plan.image_x, plan.image_y))
	draw = PIL.ImageDraw.Draw(canvas)
	for placement in plan.lines:
		draw.text(
			(placement.center_x, placement.baseline_y),
			placement.text,
			font=fonts[placement.font_size],
			fill=TEXT_COLOR,
			anchor="ms",
		)
	return canvas
