from tilestitch import __version__

# Zoom level used when the caller does not ask for one
DEFAULT_ZOOM = 18

# Maximum number of tiles per render (safeguard against downloading the world)
DEFAULT_MAX_TILES = 100

# Registry key of the provider used when none is configured
DEFAULT_PROVIDER_KEY = 'osm'

# Subdomain rotation set for mirrored tile hosts ({s} placeholder)
DEFAULT_SUBDOMAINS = ('a', 'b', 'c')

# Resolution suffix substituted for {r}; retina tiles ('@2x') are not supported
RESOLUTION_SUFFIX = ''

# Tile file suffix when the URL template does not reveal one
DEFAULT_TILE_SUFFIX = '.png'

# Prefix of ephemeral working directories
WORKDIR_PREFIX = 'tilestitch'

# Suffix of partially written tile files (replaced atomically once complete)
PARTIAL_SUFFIX = '.part'

# Identification sent with every tile request
USER_AGENT_TEMPLATE = 'tilestitch/{version} (contact: {contact})'
USER_AGENT_VERSION = __version__

# Attribution caption
ATTRIBUTION_FONT_SIZE = 8
ATTRIBUTION_ANCHOR = 'rb'
ATTRIBUTION_MARGIN_PX = 2
ATTRIBUTION_TEXT_COLOR = (0, 0, 0)
ATTRIBUTION_OUTLINE_COLOR = (255, 255, 255)
ATTRIBUTION_OUTLINE_WIDTH = 1

# Scalable fonts tried for the caption before falling back to Pillow's default
ATTRIBUTION_FONT_CANDIDATES = (
    'DejaVuSans.ttf',
    '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf',
    '/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf',
    '/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf',
    'arial.ttf',
    '/System/Library/Fonts/Helvetica.ttc',
)

# Output formats without an alpha channel
OPAQUE_OUTPUT_SUFFIXES = frozenset({'.jpg', '.jpeg', '.bmp'})

# Environment variable holding the Thunderforest API key
THUNDERFOREST_APIKEY_ENV = 'THUNDERFOREST_APIKEY'

# Log record format used by the command line entry point
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

HTTP_OK = 200
