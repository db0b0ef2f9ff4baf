"""
API integration tests for the primary color endpoint.

Tests the complete HTTP surface:
- multipart upload with both policies
- parameter validation and error handling
- response schema and metrics endpoint
"""

import numpy as np
import pytest


class TestPrimaryColorAPI:
    """Test the /v1/primary-color endpoint"""

    def _post(self, client, png, **params):
        return client.post(
            "/v1/primary-color",
            params=params,
            files={"file": ("image.png", png, "image/png")}
        )

    def test_rgb_policy(self, test_client, red_gray_png):
        response = self._post(test_client, red_gray_png)

        assert response.status_code == 200
        data = response.json()

        assert data["rgb"] == [255, 0, 0]
        assert data["decimal"] == "255 0 0"
        assert data["hex"] == "ff0000"
        assert data["css"] == "#f00"
        assert data["hsv_text"] == "0 100% 100%"
        assert data["policy"] == "rgb"
        assert data["tier"] == "strict"
        assert data["no_data"] is False
        assert data["request_id"].startswith("pick-")

    def test_hsv_policy_monochrome(self, test_client, png_encoder, gray_image):
        response = self._post(test_client, png_encoder(gray_image), policy="hsv")

        assert response.status_code == 200
        data = response.json()
        assert data["rgb"] == [0, 0, 0]
        assert data["no_data"] is True
        assert data["counted_pixels"] == 0

    def test_hsv_policy_with_windows(self, test_client, png_encoder):
        img = np.zeros((10, 10, 3), dtype=np.uint8)
        img[:] = (200, 150, 120)
        img[:2] = (20, 40, 230)
        response = self._post(
            test_client, png_encoder(img),
            policy="hsv", hue_start=-3, hue_end=24, sat_start=40, sat_end=180,
            resize_width=0, resize_height=0
        )

        assert response.status_code == 200
        data = response.json()
        r, g, b = data["rgb"]
        assert b > r and b > g
        assert data["counted_pixels"] == 20

    def test_peak_only(self, test_client, png_encoder):
        img = np.full((10, 10, 3), 128, dtype=np.uint8)
        img[0, :3] = (0, 200, 40)
        response = self._post(test_client, png_encoder(img), peak_only=True,
                              resize_width=0, resize_height=0)

        assert response.status_code == 200
        assert response.json()["rgb"] == [136, 136, 136]

    @pytest.mark.parametrize("params", [
        {"upper_chroma": 1.5},
        {"upper_chroma": 0.2, "lower_chroma": 0.4},
        {"depth": 9},
        {"median_kernel": 4},
        {"clip_ratio": 0.95},
        {"hue_start": -200},
        {"whiten": 0.0},
    ])
    def test_invalid_parameters(self, test_client, red_gray_png, params):
        response = self._post(test_client, red_gray_png, **params)
        assert response.status_code == 400
        assert "detail" in response.json()

    def test_invalid_policy_pattern(self, test_client, red_gray_png):
        response = self._post(test_client, red_gray_png, policy="lab")
        assert response.status_code == 422

    def test_corrupt_image(self, test_client):
        response = self._post(test_client, b"not an image at all")
        assert response.status_code == 400
        assert "decode" in response.json()["detail"].lower()

    def test_metrics_endpoint(self, test_client, red_gray_png):
        self._post(test_client, red_gray_png)
        response = test_client.get("/v1/metrics")

        assert response.status_code == 200
        counters = response.json()["counters"]
        assert counters["pick_requests_total"] == 1
        assert counters["pick_tier_total_strict"] == 1
