"""Version information for IGSN Import."""

__version__ = "0.1.0"
__version_info__ = (0, 1, 0)

# Release information
__author__ = "Holger Ehrmann"
__author_email__ = "ehrmann@gfz.de"
__organization__ = "GFZ Data Services, GFZ Helmholtz Centre for Geosciences"
__license__ = "GNU General Public License v3.0"
__description__ = "Bulk import parser for IGSN sample metadata CSV files"
