"""
Turn a MetadataRecord into caption lines.
"""

# local repo modules
import image_noter as imn
import image_noter.config
import image_noter.exif_lib


MetadataRecord = imn.exif_lib.MetadataRecord

UNKNOWN_DATE = imn.config.UNKNOWN_DATE
DATE_FORMAT = imn.config.DATE_FORMAT
LINE_SEPARATOR = imn.config.LINE_SEPARATOR


#============================================
def format_title_line(record: MetadataRecord) -> str:
	"""
	Return the first non-blank of title and description.
	"""
	for value in (record.title, record.description):
		if value and value.strip():
			return value
	return ""


#============================================
def format_camera_line(record: MetadataRecord) -> str:
	"""
	Build the "date | camera | lens" line.
	"""
	date_text = UNKNOWN_DATE
	if record.captured_at is not None:
		date_text = record.captured_at.strftime(DATE_FORMAT)
	parts = [date_text, record.camera_model, record.lens_model]
	return LINE_SEPARATOR.join(parts).strip()


#============================================
def format_technical_line(record: MetadataRecord) -> str:
	"""
	Build the "focal | aperture | shutter | ISO n" line.
	"""
	parts = [
		record.focal_length,
		record.aperture,
		record.shutter_speed,
		f"ISO {record.iso}",
	]
	return LINE_SEPARATOR.join(parts).strip()


#============================================
def format_display_lines(record: MetadataRecord) -> list[str]:
	"""
	Format a metadata record into display lines.

	Blank lines are dropped rather than emitted empty, so the result
	holds between zero and three lines.

	Args:
		record: MetadataRecord.

	Returns:
		List of non-blank caption lines in display order.
	"""
	lines = [
		format_title_line(record),
		format_camera_line(record),
		format_technical_line(record),
	]
	return [line for line in lines if line and line.strip()]
