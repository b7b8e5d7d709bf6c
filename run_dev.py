#!/usr/bin/env python3
"""
Frame Studio - Development Runner
Run this script to start the preview service locally
"""

import os
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

os.environ.setdefault('FLASK_ENV', 'development')

from framestudio import create_app


def main():
    """Main entry point"""
    print("=" * 60)
    print("Frame Studio - Development Server")
    print("=" * 60)

    app = create_app()

    print(f"Environment: {app.config.get('FLASK_ENV', 'unknown')}")
    print(f"Log level: {app.config.get('LOG_LEVEL', 'INFO')}")
    print(f"Catalog: {app.config.get('CATALOG_FILE')}")

    catalog = app.extensions['frame_catalog']
    if not catalog.sizes or not catalog.materials:
        print("⚠️  The frame catalog is empty; check CATALOG_FILE in config/settings.yaml")

    texture_dir = Path(app.config.get('TEXTURE_DIR', 'assets/textures'))
    missing = [m.texture for m in catalog.materials
               if m.texture and not (texture_dir / m.texture).exists() and not Path(m.texture).is_absolute()]
    if missing:
        print(f"⚠️  Missing textures (flat colors will be used): {', '.join(missing)}")

    print("-" * 60)
    print("Open your browser to: http://localhost:5000/api/catalog")
    print("Press Ctrl+C to stop")
    print("-" * 60)

    app.run(
        host='0.0.0.0',
        port=5000,
        debug=app.config.get('DEBUG', True),
        use_reloader=True,
        threaded=True
    )


if __name__ == '__main__':
    main()
