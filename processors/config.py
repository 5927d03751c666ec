"""
Artifact naming constants shared by the processors.

Resource paths are relative to the output root selected by the build
configuration (class output directory or explicit output directory).
"""

# Constructor and method parameter records
PARAMETER_RECORD_SUFFIX: str = ".stapler"
CONSTRUCTOR_KEY: str = "constructor"

# Per-type member documentation
JAVADOC_SUFFIX: str = ".javadoc"

# Cross-module registry of types exposing properties
REGISTRY_PATH: str = "META-INF/exposed.stapler-beans"

REGISTRY_ENCODING: str = "utf-8"

# Phase names used in log correlation and diagnostics
PHASE_REGISTRY_LOAD: str = "registry-load"
PHASE_CONSTRUCTORS: str = "constructors"
PHASE_QUERY_PARAMETERS: str = "query-parameters"
PHASE_EXPORTED_BEANS: str = "exported-beans"
PHASE_REGISTRY_MERGE: str = "registry-merge"
