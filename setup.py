from setuptools import setup
from pathlib import Path

here = Path(__file__).parent
reqs = here / 'requirements.txt'
install_requires = []
if reqs.exists():
    install_requires = [r.strip() for r in reqs.read_text().splitlines() if r.strip() and not r.strip().startswith('#')]

setup(
    name='repeater_csv',
    version='0.1.0',
    description='Nearest amateur repeaters by Maidenhead locator, as a radio programming CSV',
    py_modules=['maidenhead', 'repeater_sources', 'repeater_csv'],
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7.0.0'],
    },
    entry_points={
        'console_scripts': [
            'repeater-csv=repeater_csv:main',
        ],
    },
)
