# 📄 File: adoptd/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'adoptd' folder as our plant doctor application and records its version
# and basic package information.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version metadata for the ADOPTD
# (Automatic Diagnosis Of Plants and Tree Diseases) service.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - adoptd.main (application entry point)
# - pyproject.toml console script

"""
ADOPTD - Automatic Diagnosis Of Plants and Tree Diseases

Plant identification and diagnosis through a generative model, weather-driven
care advice, care reminders, and a community forum with achievements.
"""

__version__ = "1.0.0"
__title__ = "ADOPTD Plant Doctor API"
__description__ = "AI-Powered Plant Diagnosis and Care Service"
__author__ = "Plant Care Team"
__author_email__ = "dev@plantcare.app"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__author__",
    "__author_email__",
    "__license__",
]
