"""
Default configuration values for the OneExhib admin client.

This module provides default configuration values that serve as fallbacks
when config.yaml is missing or incomplete.
"""

MB = 1024 * 1024

DEFAULT_CONFIG = {
    # Backend REST API
    "api": {
        "base_url": "http://localhost:8000",
        "timeout_seconds": 30,
    },

    # List screens
    "listing": {
        "page_size": 5,
        "admin_page_size": 6,
    },

    # File inputs on the create forms
    "uploads": {
        "documents": {
            "max_bytes": 5 * MB,
            "allowed_types": [
                "application/pdf",
                "application/msword",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "image/jpeg",
                "image/png",
            ],
        },
        "images": {
            "max_bytes": 5 * MB,
            "allowed_types": ["image/jpeg", "image/png", "image/webp"],
        },
        "layouts": {
            "max_bytes": 5 * MB,
            "allowed_types": ["application/pdf", "image/jpeg", "image/png", "image/webp"],
        },
        "company_image": {
            "max_bytes": 3 * MB,
            "allowed_types": ["image/jpeg", "image/png"],
        },
        "videos": {
            "max_bytes": 50 * MB,
            "allowed_types": ["video/mp4", "video/webm", "video/quicktime"],
        },
    },

    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}
