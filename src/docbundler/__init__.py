"""docbundler - versioned JSON documentation builder for a monorepo of packages.

Scrapes JSDoc comments out of ``packages/<name>/src/*.js``, writes per-file
JSON plus a type dictionary and table of contents per version, keeps
``docs/manifest.json`` current, and merges dependency docs into the umbrella
package's bundles.
"""

__version__ = "0.3.0"
