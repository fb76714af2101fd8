from setuptools import setup, find_packages

setup(
    name='respack',
    version='0.1.0',
    author='Virgil',
    author_email='virgil@example.com',
    description='Assemble resource packs in memory and serialize them to a deterministic file tree',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    url='https://github.com/example/respack',
    packages=find_packages(include=['respack', 'respack.*']),
    install_requires=[
        'numpy>=1.20.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'License :: Other/Proprietary License',
        'Operating System :: OS Independent',
        'Topic :: Games/Entertainment',
        'Topic :: Software Development :: Libraries',
    ],
    python_requires='>=3.8',
    include_package_data=True,
    package_data={
        'respack': ['py.typed'],
    },
)
