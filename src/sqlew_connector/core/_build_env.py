# Rewritten by scripts/build.py. Do not edit by hand.
BUILD_ENV = "production"
