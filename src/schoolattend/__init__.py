"""School attendance tracking with geofenced check-ins."""
