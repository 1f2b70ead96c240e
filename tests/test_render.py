import io

import PIL.ExifTags
import PIL.Image
import pytest

import image_noter.config
import image_noter.layout
import image_noter.render


LayoutOptions = image_noter.config.LayoutOptions

BLUE = (0, 0, 255)
BLACK = (0, 0, 0)
SAMPLE_LINES = [
	"Test Image",
	"Test Camera | Test Lens",
	"f/2.8 | 1/100 | ISO 400",
]


#============================================
def test_bottom_render_size_and_placement(make_image) -> None:
	"""
	The bottom style grows only downward and keeps the photo at the origin.
	"""
	source = make_image(200, 200, BLUE)
	options = LayoutOptions(line_height=40, border_style="BOTTOM")
	result = image_noter.render.render_caption(source, SAMPLE_LINES, options)
	assert result.size == (200, 345)
	assert result.mode == "RGB"
	assert result.getpixel((0, 0)) == BLUE
	assert result.getpixel((199, 199)) == BLUE
	assert result.getpixel((2, 202)) == BLACK
	assert result.getpixel((2, 344)) == BLACK


#============================================
def test_all_render_size_and_placement(make_image) -> None:
	"""
	The all style frames the photo with a line-height border.
	"""
	source = make_image(300, 200, BLUE)
	options = LayoutOptions(line_height=50, border_style="ALL")
	result = image_noter.render.render_caption(source, SAMPLE_LINES, options)
	assert result.size == (400, 456)
	assert result.getpixel((0, 0)) == BLACK
	assert result.getpixel((49, 49)) == BLACK
	assert result.getpixel((50, 50)) == BLUE
	assert result.getpixel((349, 249)) == BLUE
	assert result.getpixel((350, 100)) == BLACK
	assert result.getpixel((200, 260)) == BLACK


#============================================
def test_caption_text_is_drawn(make_image) -> None:
	"""
	Text pixels appear in the caption strip and only there.
	"""
	source = make_image(300, 200, BLUE)
	options = LayoutOptions(line_height=50, border_style="ALL")
	result = image_noter.render.render_caption(source, SAMPLE_LINES, options)
	caption = result.crop((0, 300, 400, 456)).convert("L")
	assert caption.getextrema()[1] > 128
	top_border = result.crop((0, 0, 400, 50)).convert("L")
	assert top_border.getextrema() == (0, 0)


#============================================
def test_empty_lines_return_unchanged_copy(make_image) -> None:
	"""
	No lines means no resize and no drawing.
	"""
	source = make_image(120, 80, (10, 200, 30))
	result = image_noter.render.render_caption(source, [], LayoutOptions(border_style="ALL"))
	assert result.size == source.size
	assert result.tobytes() == source.tobytes()
	assert result is not source


#============================================
def test_none_source_rejected() -> None:
	"""
	A missing source image is a layout error.
	"""
	with pytest.raises(image_noter.layout.InvalidLayoutError):
		image_noter.render.render_caption(None, SAMPLE_LINES, LayoutOptions())


#============================================
def test_render_is_deterministic(make_image) -> None:
	"""
	Rendering twice gives the same pixels and font sizes.
	"""
	source = make_image(256, 128, (90, 60, 30))
	options = LayoutOptions(line_height=36, border_style="ALL")
	first = image_noter.render.render_caption(source, SAMPLE_LINES, options)
	second = image_noter.render.render_caption(source, SAMPLE_LINES, options)
	assert first.tobytes() == second.tobytes()
	plan_a, _fonts = image_noter.render.plan_for_image(source, SAMPLE_LINES, options)
	plan_b, _fonts = image_noter.render.plan_for_image(source, SAMPLE_LINES, options)
	assert [line.font_size for line in plan_a.lines] == [line.font_size for line in plan_b.lines]


#============================================
def test_real_font_sizes_are_monotonic(make_image) -> None:
	"""
	A wider source never shrinks the chosen font size.
	"""
	text = ["2024-05-01 18:42:07 | Canon EOS R5 | RF24-70mm F2.8 L IS USM"]
	options = LayoutOptions(line_height=60, border_style="BOTTOM")
	previous = 0
	for width in (80, 200, 400, 800, 1600, 3200):
		plan, _fonts = image_noter.render.plan_for_image(make_image(width, 50), text, options)
		size = plan.lines[0].font_size
		assert size >= previous
		previous = size
	assert previous == image_noter.config.MAX_FONT_SIZE


#============================================
def test_load_font_falls_back_to_default() -> None:
	"""
	Unloadable font paths fall back to a scalable default font.
	"""
	small = image_noter.render.load_font(["/nonexistent/font.ttf", ""], 12)
	large = image_noter.render.load_font(["/nonexistent/font.ttf"], 48)
	assert large.getlength("Sample") > small.getlength("Sample")


#============================================
@pytest.mark.parametrize(
	"requested,expected",
	[(150, 100), (100, 100), (75, 75), (1, 1), (0, 1), (-20, 1)],
)
def test_clamp_quality(requested: int, expected: int) -> None:
	"""
	Quality is clamped into 1..100.
	"""
	assert image_noter.render.clamp_quality(requested) == expected


#============================================
def test_encode_clamps_quality(make_image) -> None:
	"""
	Out-of-range qualities encode exactly like the nearest bound.
	"""
	image = make_image(64, 48, (200, 100, 50))
	assert image_noter.render.encode_image(image, 150) == image_noter.render.encode_image(image, 100)
	assert image_noter.render.encode_image(image, 0) == image_noter.render.encode_image(image, 1)
	decoded = PIL.Image.open(io.BytesIO(image_noter.render.encode_image(image, 90)))
	assert decoded.format == "JPEG"
	assert decoded.size == (64, 48)


#============================================
def test_decode_keeps_exif_and_resets_orientation(tmp_path, make_image, write_jpeg) -> None:
	"""
	Decoded images keep their EXIF block; the output copy is upright.
	"""
	exif = PIL.Image.Exif()
	exif[PIL.ExifTags.Base.Model] = "Test Camera"
	exif[PIL.ExifTags.Base.Orientation] = 6
	path = write_jpeg(tmp_path / "rotated.jpg", make_image(40, 30), exif.tobytes())

	source = image_noter.render.decode_image(path)
	assert source.mode == "RGB"
	assert source.size == (40, 30)
	assert source.info.get("exif")

	output_exif = PIL.Image.Exif()
	output_exif.load(image_noter.render.build_output_exif(source))
	assert output_exif[PIL.ExifTags.Base.Orientation] == 1
	assert output_exif[PIL.ExifTags.Base.Model] == "Test Camera"


#============================================
def test_build_output_exif_without_exif(make_image) -> None:
	"""
	Images without EXIF carry nothing over.
	"""
	assert image_noter.render.build_output_exif(make_image(10, 10)) is None


#============================================
def test_decode_errors_propagate(tmp_path) -> None:
	"""
	Missing and corrupt files raise the decoder's own errors.
	"""
	with pytest.raises(FileNotFoundError):
		image_noter.render.decode_image(tmp_path / "missing.jpg")
	corrupt = tmp_path / "corrupt.jpg"
	corrupt.write_text("This is not a valid JPEG file")
	with pytest.raises(PIL.UnidentifiedImageError):
		image_noter.render.decode_image(corrupt)
