#!/usr/bin/env python
"""
Script to exercise a running Xeriscape Rebate Designer backend against the
real AI provider. Not collected by pytest.

Usage:
    python live_api_check.py --mode breakdown --port 8000
    python live_api_check.py --mode generate --image-path path/to/yard.jpg
    python live_api_check.py --mode all
"""
import argparse
import base64
import sys
import time
import logging

import requests

from example_payloads import EXAMPLE_PAYLOADS

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class APITester:
    """Class to handle live checks of the backend"""

    def __init__(self, base_url="http://localhost", port=8000, timeout=120):
        self.base_url = f"{base_url}:{port}"
        self.timeout = timeout
        logger.info(f"Initialized API tester for {self.base_url}")

    def test_health(self):
        """Test the health check endpoint"""
        try:
            response = requests.get(self.base_url, timeout=self.timeout)
            logger.info(f"Health check status: {response.status_code}")
            return response.status_code == 200
        except requests.exceptions.RequestException as e:
            logger.error(f"Health check request failed: {str(e)}")
            return False

    def post(self, path, payload):
        """
        POST a payload and log the outcome

        Returns:
            dict: API response or None if failed
        """
        logger.info(f"POST {path}")
        try:
            start_time = time.time()
            response = requests.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
            elapsed_time = time.time() - start_time
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {str(e)}")
            return None

        logger.info(f"Status: {response.status_code}, Time: {elapsed_time:.2f}s")
        if response.status_code != 200:
            logger.error(f"Error: {response.text}")
            return None
        return response.json()

    def test_generate(self, payload, image_path=None):
        if image_path:
            with open(image_path, "rb") as img_file:
                payload = dict(
                    payload,
                    isEdit=True,
                    imageBase64=base64.b64encode(img_file.read()).decode("utf-8"),
                )
        result = self.post("/api/generate", payload)
        if result:
            for item in result.get("data", []):
                logger.info(f"Design: {item['url'][:120]}")
        return result

    def test_breakdown(self, path, payload):
        result = self.post(path, payload)
        if result:
            logger.info(f"Breakdown preview:\n{result.get('breakdown', '')[:500]}")
            if "topDownUrl" in result:
                logger.info(f"Top-down plan: {result['topDownUrl'][:120]}")
        return result


def main():
    """Main function to run the checks based on command line arguments"""
    parser = argparse.ArgumentParser(description="Exercise a running backend")
    parser.add_argument(
        "--mode",
        choices=["generate", "breakdown", "topdown", "all"],
        default="all",
    )
    parser.add_argument("--image-path", help="Yard photo to edit (generate mode)")
    parser.add_argument("--base-url", default="http://localhost", help="Base URL of the API")
    parser.add_argument("--port", type=int, default=8000, help="Port the API is running on")

    args = parser.parse_args()
    tester = APITester(args.base_url, args.port)

    if not tester.test_health():
        logger.error(f"API at {tester.base_url} is not responding. Exiting.")
        sys.exit(1)

    failures = 0
    for mode, (path, payload) in EXAMPLE_PAYLOADS.items():
        if args.mode not in (mode, "all"):
            continue
        logger.info(f"=== {mode.upper()} ===")
        if mode == "generate":
            result = tester.test_generate(payload, args.image_path)
        else:
            result = tester.test_breakdown(path, payload)
        failures += result is None

    logger.info("Checks completed")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
