"""
Módulo de captura de cámara.
Proporciona la sesión que abre la webcam y produce instantáneas JPEG.
"""

from .capture_session import MediaCaptureSession

__all__ = ['MediaCaptureSession']
