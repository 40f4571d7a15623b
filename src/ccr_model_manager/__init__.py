"""CCR Model Manager - route inspection and selection for Claude Code Router.

Modules:
    - routing: Route parsing, validation, health scoring and recommendations
    - config: Settings and the CCR config.json store
    - display: Console rendering of routing reports and providers
    - selection: Interactive provider/model/slot selection
    - restarter: Restarting the CCR process after changes
    - updater: Self-update against PyPI
"""

__version__ = "1.2.0"
