# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import os

from nestfinder.app import create_app


def main() -> None:
    create_app().run(host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "5000")))


if __name__ == "__main__":
    main()
