"""Constants and default values for Tempify."""

# Application metadata
APP_NAME = "Tempify"
VERSION = "0.4.0"
__version__ = VERSION
__author__ = "Tempify Developers"
__license__ = "MIT"
__copyright__ = "Copyright 2025 Tempify Developers"

# Remote services
DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_REQUEST_TIMEOUT = 30.0

# Canvas / export defaults
DEFAULT_CANVAS_SIZE = (800, 600)  # Matches saved design default dimensions
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_JPEG_QUALITY = 92
DEFAULT_IMAGE_ELEMENT_SIZE = (100, 100)
DEFAULT_DESIGN_NAME = "Untitled Design"

# Text element defaults
DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_FONT_SIZE = 16
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 72

# Fallback families tried after the element's own family
FALLBACK_FONT_FAMILIES = ["Inter", "Arial", "Helvetica", "DejaVu Sans", "Liberation Sans"]

NEW_TEXT_DEFAULTS = {
    "content": "New Text",
    "x": 100,
    "y": 200,
    "font_size": DEFAULT_FONT_SIZE,
    "font_family": DEFAULT_FONT_FAMILY,
    "color": "#000000",
    "font_weight": "normal",
}

CONTACT_FIELD_DEFAULTS = {
    "phone": {"content": "+1 (555) 123-4567", "x": 50, "y": 300},
    "email": {"content": "info@company.com", "x": 50, "y": 320},
    "website": {"content": "www.company.com", "x": 50, "y": 340},
}
CONTACT_FIELD_STYLE = {
    "font_size": 14,
    "font_family": DEFAULT_FONT_FAMILY,
    "color": "#666666",
    "font_weight": "normal",
}

LOGO_DEFAULTS = {"x": 300, "y": 50, "width": 100, "height": 100}

# Seed content for a design opened from a template
TEMPLATE_SEED_ELEMENTS = [
    {
        "content": "Your Brand Name",
        "x": 50,
        "y": 50,
        "font_size": 32,
        "font_family": DEFAULT_FONT_FAMILY,
        "color": "#000000",
        "font_weight": "bold",
    },
    {
        "content": "Your inspiring quote goes here",
        "x": 50,
        "y": 120,
        "font_size": 18,
        "font_family": DEFAULT_FONT_FAMILY,
        "color": "#333333",
        "font_weight": "normal",
    },
]

# Frame preset element types and their placeholder labels
PRESET_PLACEHOLDERS = {
    "name": "Your Name",
    "email": "email@example.com",
    "mobile": "+1 (555) 123-4567",
    "website": "www.example.com",
    "address": "123 Main Street",
    "facebook": "@yourhandle",
    "instagram": "@yourhandle",
    "twitter": "@yourhandle",
    "linkedin": "@yourhandle",
    "logo": "[LOGO]",
}

# Quick background swatches offered by the editor
BACKGROUND_SWATCHES = ["#ffffff", "#f3f4f6", "#dbeafe", "#dcfce7"]
