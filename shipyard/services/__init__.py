"""Release and build services.

Services implement the pipelines, coordinating between configuration
(core/), git (git/) and the subprocess runner (platform/).
"""
