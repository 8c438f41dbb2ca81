
# Core sizes: name -> (width, height, crop).  A dimension of 0 leaves that
# side unconstrained.  Each value can be overridden with the
# <NAME>_SIZE_W, <NAME>_SIZE_H and <NAME>_CROP environment variables.

CORE_IMAGE_SIZES = {
    'thumbnail': (150, 150, True),
    'medium': (300, 300, False),
    'medium_large': (768, 0, False),
    'large': (1024, 1024, False),
}

# Sizes registered on top of the core ones by the theme and plugins.
# Their origin is worked out from the size name, see SizeRegistry.

ADDITIONAL_IMAGE_SIZES = {
    # 'SIZE_NAME': (width, height, crop),
    '1536x1536': (1536, 1536, False),
    '2048x2048': (2048, 2048, False),
    'post-thumbnail': (1200, 9999, False),
    'twentytwenty-fullscreen': (1980, 9999, False),
    'woocommerce_thumbnail': (300, 300, True),
    'woocommerce_single': (600, 0, False),
    'woocommerce_gallery_thumbnail': (100, 100, True),
}

# Fragments of size names that point to a plugin.

PLUGIN_PATTERNS = (
    'woocommerce',
    'yoast',
    'elementor',
    'jetpack',
    'buddypress',
    'bbpress',
    'gallery',
    'slider',
    'portfolio',
)
