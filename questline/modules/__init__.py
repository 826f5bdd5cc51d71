"""
Engine modules: day cycle, rewards, progression, quest lifecycle, and the
per-account persistence boundary.
"""
