from imagestore.server import main

if __name__ == "__main__":
    # Connects, migrates, then serves on 0.0.0.0:8080 until interrupted
    raise SystemExit(main())
