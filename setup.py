"""
Setup script for quiz-battle package with optional Cython compilation.

This builds the hot-path internal modules (grading, selection, lobby
physics) as compiled extensions when Cython is available, while keeping
the public API (orchestrator, stores, config, errors, types) as
readable Python source.
"""

from setuptools import setup, find_packages, Extension
import os

# Check if Cython is available
try:
    from Cython.Build import cythonize
    USE_CYTHON = True
except ImportError:
    USE_CYTHON = False
    print("Cython not found. Building without compilation (source only).")

# Internal modules to compile with Cython
CYTHON_MODULES = [
    "src/quiz_battle/_grading/grader.py",
    "src/quiz_battle/_grading/matching.py",
    "src/quiz_battle/_grading/fill_blank.py",
    "src/quiz_battle/_selection/selector.py",
    "src/quiz_battle/_selection/validator.py",
    "src/quiz_battle/_lobby/physics.py",
    "src/quiz_battle/_lobby/spawn.py",
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        if os.path.exists(module_path):
            # Convert path to module name: src/quiz_battle/_lobby/physics.py -> quiz_battle._lobby.physics
            module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
            extensions.append(
                Extension(
                    name=module_name,
                    sources=[module_path],
                )
            )
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={
            "language_level": "3",
            "boundscheck": False,
            "wraparound": False,
        },
        nthreads=os.cpu_count() or 1,
    )


# Only add ext_modules if we have Cython
ext_modules = get_ext_modules() if USE_CYTHON else []

setup(
    name="quiz-battle",
    version="1.0.0",
    description="Quiz battle orchestration and scoring engine",
    author="Quiz Platform Team",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=ext_modules,
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    # Schema file for the SQLite store, plus compiled .so/.pyd files
    package_data={
        "quiz_battle._storage": ["*.sql"],
        "quiz_battle": ["*.so", "*.pyd"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Cython",
    ],
)
