#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Standalone runner for the GX402 Facilitator.

Env:
  - EVM_PRIVATE_KEY / SVM_PRIVATE_KEY (at least one required for /verify and /settle)
  - SVM_RPC_URL, EVM_RPC_URL (optional RPC overrides)
  - CUSTOM_EVM_CHAIN_ID, CUSTOM_EVM_RPC_URL, CUSTOM_USDC_ADDRESS,
    CUSTOM_TOKEN_NAME (default: USD Coin), CUSTOM_TOKEN_VERSION (default: 2)
  - HOST (default: 0.0.0.0)
  - PORT (default: 3000)
  - LOG_LEVEL (default: INFO)
"""

import logging
import os
import sys

# Add src/ to Python path
repo_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(repo_root, "src"))

# Load .env BEFORE building the config so env vars are visible to it
from dotenv import load_dotenv  # type: ignore
load_dotenv()

from gx402_facilitator import FacilitatorConfig, build_app


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("gx402_facilitator")

cfg = FacilitatorConfig()
app = build_app(cfg)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"GX402 Facilitator server is running on port {cfg.port}")
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level="info")
