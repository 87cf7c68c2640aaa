"""Small helpers around OpenCV calls and profiling."""
