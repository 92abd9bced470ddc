"""CLI package for pkgbridge."""
