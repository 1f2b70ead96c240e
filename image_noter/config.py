"""
Shared configuration and constants.
"""

import dataclasses


MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 48
BOTTOM_SIDE_PADDING = 20
BOTTOM_MARGIN_RATIO = 0.12

DEFAULT_LINE_HEIGHT = 60
DEFAULT_OUTPUT_QUALITY = 100
MIN_QUALITY = 1
MAX_QUALITY = 100

BORDER_BOTTOM = "BOTTOM"
BORDER_ALL = "ALL"
BORDER_STYLES = (BORDER_BOTTOM, BORDER_ALL)
DEFAULT_BORDER_STYLE = BORDER_BOTTOM

BACKGROUND_COLOR = (0, 0, 0)
TEXT_COLOR = (255, 255, 255)

UNKNOWN_DATE = "Unknown Date"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LINE_SEPARATOR = " | "

DEFAULT_SUBFOLDER = "images with exif"
OUTPUT_PREFIX = "processed_"
INPUT_SUFFIX = ".jpg"
PROGRESS_BAR_WIDTH = 20

DEFAULT_FONT_PATHS = [
	"arial.ttf",
	"Arial.ttf",
	"/usr/share/fonts/truetype/msttcorefonts/Arial.ttf",
	"/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
	"/Library/Fonts/Arial.ttf",
	"/System/Library/Fonts/Supplemental/Arial.ttf",
	"DejaVuSans.ttf",
]


@dataclasses.dataclass(frozen=True)
class LayoutOptions:
	line_height: int = DEFAULT_LINE_HEIGHT
	border_style: str = DEFAULT_BORDER_STYLE
	output_quality: int = DEFAULT_OUTPUT_QUALITY


@dataclasses.dataclass
class LinePlacement:
	text: str
	font_size: int
	baseline_y: float
	center_x: int


@dataclasses.dataclass
class CanvasPlan:
	width: int
	height: int
	top_border: int
	bottom_border: int
	side_padding: int
	image_x: int
	image_y: int
	text_top: int
	lines: list[LinePlacement] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class AnnotationConfig:
	input_dir: str
	output_dir: str
	layout: LayoutOptions
	font_paths: list[str]
	preserve_exif: bool


@dataclasses.dataclass
class BatchResult:
	total_files: int
	processed_files: int
	failed_files: int
	output_dir: str
	failures: list[str] = dataclasses.field(default_factory=list)


#============================================
def normalize_border_style(value: str) -> str:
	"""
	Normalize a border style name.

	Args:
		value: Border style such as "bottom" or "ALL".

	Returns:
		Upper-case border style string.
	"""
	return (value or "").strip().upper()
