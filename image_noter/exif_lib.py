"""
EXIF and XMP metadata extraction.
"""

# Standard Library
import dataclasses
import datetime
import pathlib

# PIP3 modules
import defusedxml
import defusedxml.ElementTree as ElementTree
import PIL.ExifTags
import PIL.Image


EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

Base = PIL.ExifTags.Base


@dataclasses.dataclass(frozen=True)
class MetadataRecord:
	title: str = ""
	description: str = ""
	captured_at: datetime.datetime | None = None
	camera_model: str = ""
	lens_model: str = ""
	focal_length: str = ""
	aperture: str = ""
	shutter_speed: str = ""
	iso: str = ""


#============================================
def rational_to_float(value) -> float | None:
	"""
	Convert an EXIF rational (or number, or (num, den) pair) to a float.

	Args:
		value: Raw tag value.

	Returns:
		Float value or None when the value is not numeric.
	"""
	if value is None:
		return None
	if isinstance(value, (tuple, list)):
		if len(value) == 2:
			numerator, denominator = value
			if not denominator:
				return None
			return float(numerator) / float(denominator)
		if len(value) == 1:
			return rational_to_float(value[0])
		return None
	try:
		result = float(value)
	except (TypeError, ValueError, ZeroDivisionError):
		return None
	if result != result:
		# NaN from a zero-denominator IFDRational
		return None
	return result


#============================================
def clean_string(value) -> str:
	"""
	Decode and strip a string tag value.
	"""
	if value is None:
		return ""
	if isinstance(value, bytes):
		value = value.decode("utf-8", "ignore")
	return str(value).replace("\x00", "").strip()


#============================================
def describe_focal_length(value) -> str:
	"""
	Describe a focal length like "50 mm" or "4.2 mm".
	"""
	focal = rational_to_float(value)
	if focal is None or focal <= 0:
		return ""
	return f"{round(focal, 1):g} mm"


#============================================
def describe_aperture(value) -> str:
	"""
	Describe an f-number like "f/2.8".
	"""
	fnumber = rational_to_float(value)
	if fnumber is None or fnumber <= 0:
		return ""
	return f"f/{fnumber:.1f}"


#============================================
def describe_exposure_time(value) -> str:
	"""
	Describe an exposure time.

	Exposures shorter than a second render as "1/n sec" when they are
	close to a unit fraction, longer ones as "n sec".

	Args:
		value: Raw ExposureTime tag value.

	Returns:
		Description string, empty when the value is unusable.
	"""
	seconds = rational_to_float(value)
	if seconds is None or seconds <= 0:
		return ""
	if seconds < 1.0:
		denominator = round(1.0 / seconds)
		if denominator > 0 and abs(1.0 / denominator - seconds) < 0.02 * seconds:
			return f"1/{denominator} sec"
		return f"{seconds:.3g} sec"
	return f"{round(seconds, 1):g} sec"


#============================================
def describe_iso(value) -> str:
	"""
	Describe an ISO speed, taking the first entry of a sequence.
	"""
	if isinstance(value, (tuple, list)):
		if not value:
			return ""
		value = value[0]
	if value is None:
		return ""
	try:
		return str(int(value))
	except (TypeError, ValueError):
		return clean_string(value)


#============================================
def describe_lens(value) -> str:
	"""
	Describe a lens from LensModel text or a LensSpecification tuple.
	"""
	if isinstance(value, (tuple, list)):
		if len(value) != 4:
			return ""
		min_focal, max_focal, min_fnumber, _max_fnumber = (
			rational_to_float(item) for item in value
		)
		if not min_focal:
			return ""
		text = f"{min_focal:g}mm"
		if max_focal and max_focal != min_focal:
			text = f"{min_focal:g}-{max_focal:g}mm"
		if min_fnumber:
			text += f" f/{min_fnumber:.1f}"
		return text
	return clean_string(value)


#============================================
def parse_exif_datetime(value) -> datetime.datetime | None:
	"""
	Parse an EXIF "YYYY:MM:DD HH:MM:SS" timestamp.

	Args:
		value: Raw tag value.

	Returns:
		datetime or None when missing or malformed.
	"""
	text = clean_string(value)
	if not text:
		return None
	try:
		return datetime.datetime.strptime(text[:19], EXIF_DATETIME_FORMAT)
	except ValueError:
		return None


#============================================
def parse_xmp_description(xmp) -> str:
	"""
	Extract the dc:description text from an XMP packet.

	Args:
		xmp: Raw XMP packet as bytes or str.

	Returns:
		Description text, or an empty string.
	"""
	if not xmp:
		return ""
	if isinstance(xmp, bytes):
		xmp = xmp.decode("utf-8", "ignore")
	xmp = xmp.strip("\x00 \r\n\t\ufeff")
	try:
		root = ElementTree.fromstring(xmp)
	except (ElementTree.ParseError, defusedxml.DefusedXmlException):
		return ""
	for element in root.iter():
		if not str(element.tag).endswith("}description"):
			continue
		for child in element.iter():
			if str(child.tag).endswith("}li") and child.text and child.text.strip():
				return child.text.strip()
		if element.text and element.text.strip():
			return element.text.strip()
	return ""


#============================================
def record_from_tags(
	base_tags: dict,
	exif_tags: dict,
	xmp_description: str = "",
) -> MetadataRecord:
	"""
	Map raw tag dictionaries to a MetadataRecord.

	Args:
		base_tags: IFD0 tags keyed by numeric tag id.
		exif_tags: Exif sub-IFD tags keyed by numeric tag id.
		xmp_description: Description taken from the XMP packet.

	Returns:
		MetadataRecord.
	"""
	captured_at = parse_exif_datetime(exif_tags.get(Base.DateTimeOriginal))
	if captured_at is None:
		captured_at = parse_exif_datetime(base_tags.get(Base.DateTime))

	lens = describe_lens(exif_tags.get(Base.LensModel))
	if not lens:
		lens = describe_lens(exif_tags.get(Base.LensSpecification))

	iso_value = exif_tags.get(Base.ISOSpeedRatings)

	return MetadataRecord(
		title=clean_string(base_tags.get(Base.ImageDescription)),
		description=clean_string(xmp_description),
		captured_at=captured_at,
		camera_model=clean_string(base_tags.get(Base.Model)),
		lens_model=lens,
		focal_length=describe_focal_length(exif_tags.get(Base.FocalLength)),
		aperture=describe_aperture(exif_tags.get(Base.FNumber)),
		shutter_speed=describe_exposure_time(exif_tags.get(Base.ExposureTime)),
		iso=describe_iso(iso_value),
	)


#============================================
def extract_metadata(path: pathlib.Path | str) -> MetadataRecord:
	"""
	Read EXIF and XMP metadata from an image file.

	Args:
		path: Image path.

	Returns:
		MetadataRecord, all-empty when the file carries no tags.
	"""
	with PIL.Image.open(path) as image:
		exif = image.getexif()
		base_tags = dict(exif)
		exif_tags = dict(exif.get_ifd(PIL.ExifTags.IFD.Exif))
		xmp = image.info.get("xmp", b"")
	return record_from_tags(base_tags, exif_tags, parse_xmp_description(xmp))
