from setuptools import setup, find_packages

setup(
    name='furniture-taxonomy',
    version='0.1.0',
    packages=find_packages(exclude=['tests']),
    include_package_data=True,
    package_data={
        'furniture_taxonomy': ['taxonomy/*.ttl', 'templates/*.html'],
    },
    python_requires='>=3.9',
    install_requires=[
        'Click',
        'rdflib',
        'jinja2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points='''
        [console_scripts]
        furniture-taxonomy=furniture_taxonomy.cli:main
    ''',
)
