# mirror <sysexits.h> where a matching code exists
EXIT_OK = 0  # Coverage meets the minimum
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_THRESHOLD = 2  # Coverage below the configured minimum
EXIT_DATAERR = 65  # Profile or reporter output was invalid, or nothing left to measure
EXIT_NOINPUT = 66  # Coverage profile not found
EXIT_SOFTWARE = 70  # Test run failed (failing tests or instrumentation error)
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad [tool.covgate] table)
EXIT_INTERRUPTED = 130  # Test run cancelled by SIGINT
