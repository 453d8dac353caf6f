from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="motioncast",
    version="0.1.0",
    description="Cursor motion synthesis and ffmpeg overlay/zoom expressions for screen recordings",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="SennePieters",
    author_email="senne.pieters02@gmail.com",
    packages=["motioncast", "motioncast.cursor", "motioncast.zoom"],
    install_requires=[
        "Pillow>=9.2",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
