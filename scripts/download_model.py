import sys

from src.provisioning.provisioner import main

if __name__ == "__main__":
    # Pre-download the embedding model(s) during Docker build
    sys.exit(main())
