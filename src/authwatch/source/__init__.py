"""Line sources feeding the monitor."""
