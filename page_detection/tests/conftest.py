import cv2
import numpy as np
import pytest


def draw_page(width, height, corners, background=30):
    """Dark background with a white page polygon"""
    image = np.full((height, width, 3), background, dtype=np.uint8)
    cv2.fillPoly(image, [np.array(corners, dtype=np.int32)], (255, 255, 255))
    return image


@pytest.fixture
def page_scene():
    """1000x1500 photo of an axis-aligned 700x1200 page"""
    corners = [[150, 150], [850, 150], [850, 1350], [150, 1350]]
    return draw_page(1000, 1500, corners), np.array(corners, dtype=np.float32)


@pytest.fixture
def small_scene():
    """400x600 photo of an axis-aligned page, fast to process"""
    corners = [[60, 60], [340, 60], [340, 540], [60, 540]]
    return draw_page(400, 600, corners), np.array(corners, dtype=np.float32)


@pytest.fixture
def skewed_scene():
    """Page photographed at an angle"""
    corners = [[200, 150], [820, 220], [880, 1300], [130, 1380]]
    return draw_page(1000, 1500, corners), np.array(corners, dtype=np.float32)


@pytest.fixture
def uniform_image():
    """Featureless 400x300 gray frame"""
    return np.full((300, 400, 3), 128, dtype=np.uint8)
