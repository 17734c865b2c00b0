from .loader import SteeringCalibration, load_calibration, DEFAULT_CALIBRATION_FILE

__all__ = ["SteeringCalibration", "load_calibration", "DEFAULT_CALIBRATION_FILE"]
