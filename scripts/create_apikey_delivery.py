#!/usr/bin/env python3
"""
Create an API key through the admin API and write its delivery document.

Usage:
    python scripts/create_apikey_delivery.py
    python scripts/create_apikey_delivery.py --name "测试账户_001" --totalCostLimit 50
    python scripts/create_apikey_delivery.py --expirationDays 30 --output docs/vip.md

ADMIN_USERNAME and ADMIN_PASSWORD must be set in the environment or .env.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from keydelivery.cli import main

if __name__ == "__main__":
    sys.exit(main())
