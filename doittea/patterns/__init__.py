"""Pattern resolution for source files and destination paths.

This module provides the mini-language used by source groups:

Source patterns:
    "js/*.js"        glob under the configured source root
    "!/abs/**/*.js"  raw glob, not prefixed
    "#bower:js"      files from the 'bower' plugin, '.js' only
    "@vendor"        files from the 'vendor' task

Destination patterns:
    "js/app.js"                 plain path
    "js/app-$VERSION$.js@concat" path plus mapper task

Classes:
    SourcePattern, DestinationPattern, PatternSpec: parsed patterns
    Source: ABC for source resolution strategies
    Destination: Resolved output path and mapper

Functions:
    resolve_sources: Resolve a source pattern into files
    resolve_destination: Resolve a destination pattern
"""

from .grammar import (
    SourceKind, SourcePattern, DestinationPattern, PatternSpec,
    parse_source_pattern, parse_destination_pattern, parse_event_pattern,
)
from .sources import (
    Source, PluginSource, TaskSource, RawGlobSource, RootGlobSource,
    default_glob, resolve_sources,
)
from .destinations import Destination, resolve_destination

__all__ = [
    # Grammar
    'SourceKind', 'SourcePattern', 'DestinationPattern', 'PatternSpec',
    'parse_source_pattern', 'parse_destination_pattern', 'parse_event_pattern',
    # Sources
    'Source', 'PluginSource', 'TaskSource', 'RawGlobSource', 'RootGlobSource',
    'default_glob', 'resolve_sources',
    # Destinations
    'Destination', 'resolve_destination',
]
