"""
Provisioning service — package managers and the repositories they use.

Layers, lowest first:

    L0 data/           static tables and built-in provider definitions
    L3 detection/      read-only host checks
    L2 resolver/       pure decisions over detection results
    L4 execution/      command runner, file operations, step engine
    L5 orchestration/  coordinators used by the CLI

``registry`` sits beside the layers: it loads definitions (L0) and
resolves binaries (L3).
"""
