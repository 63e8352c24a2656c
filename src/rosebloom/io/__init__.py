from rosebloom.io.exporter import LayoutExporter, LayoutMetadata
