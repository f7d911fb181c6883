from setuptools import setup, find_packages

install_requires = [
    # Core requirements
    "colorama>=0.4.6",
    "rich>=13.5.2",
    "jsonschema>=4.19.0",

    # GUI requirements - Qt6 ecosystem
    "PyQt6>=6.5.0",
    "qasync>=0.27.1",
]

# Development dependencies
extras_require = {
    'dev': [
        'pytest>=7.4.0',
        'pytest-cov>=4.1.0',
        'black>=23.7.0',
        'isort>=5.12.0',
        'mypy>=1.4.1',
        'flake8>=6.1.0',
    ]
}

setup(
    name="uiproducer",
    version="1.0.0",
    description="Refreshable UI state driven by cancellable async producers",
    packages=find_packages(include=["uiproducer", "uiproducer.*"]),
    python_requires='>=3.11',
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "uiproducer=uiproducer.main:run",
            "uiproducer_gui=uiproducer.gui.main:main"
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
        "Environment :: X11 Applications :: Qt",
        "Framework :: AsyncIO",
    ],
)
