from setuptools import setup, find_packages

setup(
    name="video-lyrics",
    version="0.1.0",
    description="Follow time-synced lyrics, translation and phonetics of a music video in your terminal while an MPRIS player plays it",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"video_lyrics": ["py.typed", "i18n/*.json"]},
    install_requires=[
        "colorama",
        "dbus-python",
        "requests",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "video-lyrics=video_lyrics.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Video",
        "Topic :: Utilities",
    ],
    keywords="lyrics karaoke video mpris gemini synchronized transcript",
)
