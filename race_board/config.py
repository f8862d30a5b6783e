import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Bot configuration settings"""
    
    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support
    OWNER_DISCORD_ID = int(os.getenv('OWNER_DISCORD_ID', 0))
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///race_board.db')
    
    # Logging
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    
    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    
    # Reveal settings
    REVEAL_DELAY_SECONDS = float(os.getenv('REVEAL_DELAY_SECONDS', 0.3))
    REVEAL_BATCH_SIZE = int(os.getenv('REVEAL_BATCH_SIZE', 3))
    
    # Seed a fresh roster with the sample teams instead of one blank team
    USE_SAMPLE_ROSTER = os.getenv('USE_SAMPLE_ROSTER', 'False').lower() == 'true'
    
    @classmethod
    def get_guild_ids(cls):
        """Get list of guild IDs for command syncing"""
        if cls.DISCORD_GUILD_IDS:
            try:
                return [int(guild_id.strip()) for guild_id in cls.DISCORD_GUILD_IDS.split(',') if guild_id.strip()]
            except ValueError:
                raise ValueError("DISCORD_GUILD_IDS must be comma-separated integers")
        elif cls.DISCORD_GUILD_ID:
            return [cls.DISCORD_GUILD_ID]
        else:
            # Global sync
            return []
    
    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not cls.OWNER_DISCORD_ID:
            raise ValueError("OWNER_DISCORD_ID is required")
        if cls.REVEAL_DELAY_SECONDS < 0:
            raise ValueError("REVEAL_DELAY_SECONDS must not be negative")
        if cls.REVEAL_BATCH_SIZE < 1:
            raise ValueError("REVEAL_BATCH_SIZE must be at least 1")
