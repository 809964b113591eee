"""Sails runtime config generation for Pivotal Web Services.

Renders the two environment files a treeline (Sails) app needs to run on
Cloud Foundry:

    config/env/development.js   reads bound service credentials from
                                VCAP_SERVICES (postgres + redis)
    config/local.js             disk-backed database for local runs

The output is opaque JavaScript; nothing here parses or validates it.
"""

from __future__ import annotations

from dataclasses import dataclass

DEVELOPMENT_CONFIG_PATH = "config/env/development.js"
LOCAL_CONFIG_PATH = "config/local.js"

DEFAULT_CREDENTIALS_ENV_VAR = "VCAP_SERVICES"
DEFAULT_DATABASE_LABEL = "elephantsql"
DEFAULT_CACHE_LABEL = "rediscloud"
DEFAULT_SESSION_PREFIX = "sess:"
DEFAULT_LOCAL_PORT = 1337

# Interpolation points: {credentials_env_var}, {database_label},
# {cache_label}, {session_prefix}. Literal braces are doubled.
_DEVELOPMENT_TEMPLATE = """
/**
 * Development environment settings
 */

if (process.env.{credentials_env_var}) {{
  vcapServices = JSON.parse(process.env.{credentials_env_var});

  module.exports = {{

    /***************************************************************************
     * Set the default database connection for models in the development       *
     * environment (see config/connections.js and config/models.js )           *
     ***************************************************************************/

    models: {{
      connection: 'sailsPsql',
      migrate: 'drop'
    }},
    connections: {{
      sailsPsql: {{
        adapter: 'sails-postgresql',
        url: vcapServices.{database_label}[0].credentials.uri
      }}
    }},

    /***************************************************************************
     * Session configuration                                                   *
     ***************************************************************************/

    session: {{
      adapter: 'redis',
      host: vcapServices.{cache_label}[0].credentials.hostname,
      port: vcapServices.{cache_label}[0].credentials.port,
      pass: vcapServices.{cache_label}[0].credentials.password,
      prefix: '{session_prefix}',
      // ttl: <redis session TTL in seconds>,
      // db: 0,
    }},

    /***************************************************************************
     * WebSocket Configuration                                                 *
     ***************************************************************************/

    sockets: {{
      adapter: 'socket.io-redis',
      host: vcapServices.{cache_label}[0].credentials.hostname,
      port: vcapServices.{cache_label}[0].credentials.port,
      pass: vcapServices.{cache_label}[0].credentials.password,
      // db: 'sails',
    }},

    /***************************************************************************
     * Set the port in the development environment to 80                       *
     ***************************************************************************/

    port: process.env.PORT,

    /***************************************************************************
     * Set the log level in development environment to "silent"                *
     ***************************************************************************/

    log: {{
       level: "verbose"
    }}

  }};
}}
"""

# Interpolation point: {default_port}.
_LOCAL_TEMPLATE = """
/**
 * Local environment settings
 */

module.exports = {{

  /***************************************************************************
   * Set the default database connection for models in the local             *
   * environment (see config/connections.js and config/models.js )           *
   ***************************************************************************/

  models: {{
    connection: 'localDiskDb',
  }},
  connections: {{
    localDiskDb: {{
      adapter: 'sails-disk',
    }}
  }},

  /***************************************************************************
   * Session configuration                                                   *
   ***************************************************************************/

  session: {{
  }},

  /***************************************************************************
   * WebSocket Configuration                                                 *
   ***************************************************************************/

  sockets: {{
  }},

  /***************************************************************************
   * Set the port in the development environment to 80                       *
   ***************************************************************************/

  port: process.env.PORT || {default_port},

  /***************************************************************************
   * Set the log level in development environment to "silent"                *
   ***************************************************************************/

  log: {{
     level: "verbose"
  }}

}};
"""


@dataclass(frozen=True)
class ConfigFile:
    """A rendered config file and where it goes, relative to the app root."""

    relative_path: str
    content: str


def render_development_config(
    *,
    credentials_env_var: str = DEFAULT_CREDENTIALS_ENV_VAR,
    database_label: str = DEFAULT_DATABASE_LABEL,
    cache_label: str = DEFAULT_CACHE_LABEL,
    session_prefix: str = DEFAULT_SESSION_PREFIX,
) -> str:
    """Render config/env/development.js.

    Args:
        credentials_env_var: Environment variable holding the service
            credentials JSON.
        database_label: Service label whose first entry carries the
            postgres ``uri``.
        cache_label: Service label whose first entry carries the redis
            ``hostname``, ``port`` and ``password``.
        session_prefix: Redis key prefix for sessions.
    """
    return _DEVELOPMENT_TEMPLATE.format(
        credentials_env_var=credentials_env_var,
        database_label=database_label,
        cache_label=cache_label,
        session_prefix=session_prefix,
    )


def render_local_config(*, default_port: int = DEFAULT_LOCAL_PORT) -> str:
    """Render config/local.js."""
    return _LOCAL_TEMPLATE.format(default_port=default_port)


def build_config_files(
    *,
    database_label: str = DEFAULT_DATABASE_LABEL,
    cache_label: str = DEFAULT_CACHE_LABEL,
) -> list[ConfigFile]:
    """Both config files in the order they are written.

    The labels are the service offerings, which is how VCAP_SERVICES keys
    the credentials of bound instances.
    """
    return [
        ConfigFile(
            DEVELOPMENT_CONFIG_PATH,
            render_development_config(
                database_label=database_label,
                cache_label=cache_label,
            ),
        ),
        ConfigFile(LOCAL_CONFIG_PATH, render_local_config()),
    ]
