""" Logging configuration for applications that classify mutations.

Apply it while the application starts, before loading any algorithms:

    import logging.config
    from virmut.utils.virmut_logging_config import LOGGING
    logging.config.dictConfig(LOGGING)

To change the settings, copy this file to virmut_logging_override.py and edit
the copy. Do not commit virmut_logging_override.py to source control.

For a detailed description of the settings, see the Python documentation:
https://docs.python.org/3/library/logging.config.html#logging-config-dictschema
"""
import os

LOG_FILE = os.environ.get('VIRMUT_LOG_FILE', '/tmp/virmut.log')

LOGGING = {
    'root': {'handlers': ['console', 'file'],
             'level': 'INFO'},
    'loggers': {
        # Lists the genes kept and dropped from each algorithm.
        'virmut.resistance': {'level': 'INFO'},
        'virmut.viruses': {'level': 'INFO'}
    },

    # This lets you call logging.getLogger() before the configuration is done.
    'disable_existing_loggers': False,

    'version': 1,
    'formatters': {'basic': {
        'format': '%(asctime)s[%(levelname)s]%(name)s.%(funcName)s(): %(message)s',
        'datefmt': '%Y-%m-%d %H:%M:%S'}},
    'handlers': {'console': {'class': 'logging.StreamHandler',
                             'level': 'DEBUG',
                             'formatter': 'basic'},
                 'file': {'class': 'logging.handlers.RotatingFileHandler',
                          'level': 'DEBUG',
                          'formatter': 'basic',
                          'filename': LOG_FILE,
                          'delay': True,
                          'maxBytes': 1024*1024*15,  # 15MB
                          'backupCount': 10}},
}
