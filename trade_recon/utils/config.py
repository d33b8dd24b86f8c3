"""
Configuration utilities
"""

import yaml
from pathlib import Path
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

JOURNAL_IMPORT_CONFIG = "journal_import"


class ConfigManager:
    """Manages configuration loading"""
    
    def __init__(self, config_dir: str = "config"):
        self.config_dir = Path(config_dir)
        
    def load_config(self, config_type: str) -> Dict[str, Any]:
        """Load configuration of specified type"""
        try:
            # Try local config first, then fall back to template
            local_file = self.config_dir / f"{config_type}_local.yml"
            template_file = self.config_dir / f"{config_type}.yml"
            
            config_file = local_file if local_file.exists() else template_file
            
            if not config_file.exists():
                logger.warning(f"Config file not found: {config_file}")
                return {}
                
            with open(config_file, 'r') as f:
                config = yaml.safe_load(f) or {}
                
            logger.info(f"Loaded config from {config_file}")
            return config
            
        except Exception as e:
            logger.error(f"Failed to load config {config_type}: {e}")
            return {}
    
    def get_importer_config(self) -> Dict[str, Any]:
        """Get execution importer configuration"""
        return self.load_config(JOURNAL_IMPORT_CONFIG).get('importer') or {}
    
    def get_journal_config(self) -> Dict[str, Any]:
        """Get journal store configuration"""
        journal = self.load_config(JOURNAL_IMPORT_CONFIG).get('journal') or {}
        journal.setdefault('db_path', 'data/journal.duckdb')
        return journal
    
    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration"""
        return self.load_config(JOURNAL_IMPORT_CONFIG).get('logging') or {}
