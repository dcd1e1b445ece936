"""Sensor driver plugins discovered by sensehat.plugins_loader."""
