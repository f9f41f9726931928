"""Common literal values used across site_emmer.

These constants keep file names, extensions, and directory names centralized
so the discoverer, publisher, sitemap writer, watcher, and tests can import the
same values without drifting. Intended for internal use within the site_emmer
package.

Examples
--------
>>> from site_emmer import _constants
>>> _constants.SITEMAP_FILENAME
'sitemap.xml'
>>> ".yaml" in _constants.DATA_SUFFIXES
True
"""

CONTENT_SUFFIX = ".html"
DATA_SUFFIXES = (".yaml", ".yml")
TEMPLATE_SUFFIX = ".html"
SITE_DATA_STEM = "site"
SITEMAP_FILENAME = "sitemap.xml"
DEFAULT_BASE_URL = "https://example.com"
STATIC_ASSET_DIRS = ("images", "css", "js", "assets", "fonts", "downloads")
WATCHED_SUFFIXES = (CONTENT_SUFFIX, *DATA_SUFFIXES)
CONFIG_FILENAME = "emmer.yaml"
