"""Capture, detection, control, visualization and utility modules."""
