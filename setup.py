from setuptools import setup, find_packages

# Read the contents of your README file
from pathlib import Path
this_directory = Path(__file__).parent
long_description = (this_directory / "somap/README.md").read_text() # Use the library's README

setup(
    name='somap',
    version='0.1.0', # Corresponds to __version__ in __init__.py
    description='A PyTorch-based Self-Organizing Map (SOM) library with pluggable training policies.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(where=".", include=['somap', 'somap.*']),
    package_data={'somap': ['README.md']},
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Operating System :: OS Independent',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    python_requires='>=3.10',
    install_requires=[
        'torch>=2.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
    keywords='som, self-organizing map, kohonen map, pytorch, machine learning',
)
